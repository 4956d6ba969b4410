from __future__ import annotations

import html

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from aetheris.editor.placement import PALETTE
from aetheris.editor.renderer import render_canvas
from aetheris.editor.session import registry

router = APIRouter(prefix="/editor", tags=["editor"])


EDITOR_TEMPLATE = """
<!DOCTYPE html>
<html lang="pt-BR">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>Editor Visual | Aetheris</title>
    <script src="https://cdn.tailwindcss.com"></script>
    <style>
        body { font-family:'Inter',system-ui,sans-serif; background:#0a0a0f; color:#fff; margin:0; }
        .layout { display:grid; grid-template-columns:220px 1fr 260px; height:100vh; }
        .palette, .panel { background:#111118; padding:20px; border-color:rgba(255,255,255,0.08); }
        .palette { border-right:1px solid rgba(255,255,255,0.08); }
        .panel { border-left:1px solid rgba(255,255,255,0.08); }
        .palette-item { padding:10px 12px; margin-bottom:8px; border-radius:10px; background:#1a1a24; cursor:grab; }
        .palette-item.dragging { opacity:0.5; }
        .toolbar { display:flex; gap:8px; padding:12px 20px; border-bottom:1px solid rgba(255,255,255,0.08); }
        .toolbar button { background:#1a1a24; color:#fff; border:0; padding:8px 14px; border-radius:8px; cursor:pointer; }
        .toolbar button:disabled { opacity:0.4; cursor:default; }
        #canvas-host { padding:24px; overflow:auto; height:calc(100vh - 58px); }
        .field { margin-bottom:12px; }
        .field label { display:block; font-size:12px; color:rgba(255,255,255,0.6); margin-bottom:4px; }
        .field input, .field select { width:100%; background:#1a1a24; color:#fff; border:1px solid rgba(255,255,255,0.1); border-radius:8px; padding:6px 8px; }
    </style>
</head>
<body>
    <div class="layout">
        <aside class="palette">
            <h2 style="margin-top:0;">Componentes</h2>
            {{ palette }}
        </aside>
        <main>
            <div class="toolbar">
                <button id="undo-btn" onclick="runAction('undo')">Desfazer</button>
                <button id="redo-btn" onclick="runAction('redo')">Refazer</button>
                <button onclick="runAction('save')">Salvar</button>
            </div>
            <div id="canvas-host">{{ canvas }}</div>
        </main>
        <aside class="panel">
            <h2 style="margin-top:0;">Propriedades</h2>
            <div id="panel-body"></div>
        </aside>
    </div>
    <script>
        const SESSION_ID = "{{ session_id }}";
        const API = `/api/editor/sessions/${SESSION_ID}`;

        async function call(path, method, body) {
            const response = await fetch(API + path, {
                method: method || 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: body ? JSON.stringify(body) : undefined,
            });
            return response.json();
        }

        async function refresh(state) {
            const canvas = await fetch(API + '/canvas');
            document.getElementById('canvas-host').innerHTML = await canvas.text();
            document.getElementById('undo-btn').disabled = !state.canUndo;
            document.getElementById('redo-btn').disabled = !state.canRedo;
            renderPanel(state);
            bindCanvas();
        }

        function renderPanel(state) {
            const body = document.getElementById('panel-body');
            if (!state.panel.selected) {
                body.innerHTML = '<p style="color:rgba(255,255,255,0.5)">Selecione um componente</p>';
                return;
            }
            body.innerHTML = '';
            state.panel.fields.forEach(field => {
                const wrapper = document.createElement('div');
                wrapper.className = 'field';
                const label = document.createElement('label');
                label.textContent = field.label;
                wrapper.appendChild(label);
                const input = document.createElement(field.widget);
                input.value = field.value || '';
                input.addEventListener('change', async () => {
                    const props = {};
                    props[field.key] = input.value;
                    refresh(await call(`/components/${state.selectedId}`, 'PATCH', props));
                });
                wrapper.appendChild(input);
                body.appendChild(wrapper);
            });
            Object.entries(state.panel.layout).forEach(([name, options]) => {
                const wrapper = document.createElement('div');
                wrapper.className = 'field';
                wrapper.innerHTML = `<label>${name}</label>`;
                const select = document.createElement('select');
                options.forEach(option => select.add(new Option(option, option)));
                select.addEventListener('change', async () => {
                    const current = state.panel.fields.find(field => field.key === 'className');
                    const classes = (current ? current.value : '').split(' ').filter(token => token && !options.includes(token));
                    classes.push(select.value);
                    refresh(await call(`/components/${state.selectedId}`, 'PATCH', { className: classes.join(' ') }));
                });
                wrapper.appendChild(select);
                body.appendChild(wrapper);
            });
            const remove = document.createElement('button');
            remove.textContent = 'Excluir';
            remove.onclick = async () => refresh(await call(`/components/${state.selectedId}`, 'DELETE'));
            body.appendChild(remove);
        }

        async function runAction(action) {
            const state = await call('/' + action);
            if (action === 'save') {
                return;
            }
            refresh(state);
        }

        function bindCanvas() {
            const canvas = document.querySelector('[data-drop-target="canvas"]');
            canvas.addEventListener('click', async () => refresh(await call('/select', 'POST', { id: null })));
            canvas.addEventListener('dragover', event => {
                event.preventDefault();
                canvas.classList.add('bg-cyan-neon/5');
            });
            canvas.addEventListener('dragleave', () => canvas.classList.remove('bg-cyan-neon/5'));
            canvas.addEventListener('drop', async event => {
                event.preventDefault();
                canvas.classList.remove('bg-cyan-neon/5');
                const payload = JSON.parse(event.dataTransfer.getData('application/json'));
                refresh(await call('/drop', 'POST', payload));
            });
            canvas.querySelectorAll('[data-node-id]').forEach(node => {
                node.addEventListener('click', async event => {
                    event.stopPropagation();
                    refresh(await call('/select', 'POST', { id: node.dataset.nodeId }));
                });
            });
        }

        document.querySelectorAll('.palette-item').forEach(item => {
            item.addEventListener('dragstart', event => {
                item.classList.add('dragging');
                event.dataTransfer.setData('application/json', JSON.stringify({ kind: 'COMPONENT', type: item.dataset.type }));
            });
            item.addEventListener('dragend', () => item.classList.remove('dragging'));
        });

        fetch(API).then(response => response.json()).then(refresh);
    </script>
</body>
</html>
"""


def _palette_html() -> str:
    return "\n".join(
        f'<div class="palette-item" draggable="true" data-type="{html.escape(item.type)}">'
        f"{html.escape(item.icon)} {html.escape(item.label)}</div>"
        for item in PALETTE
    )


@router.get("/{session_id}", response_class=HTMLResponse)
async def editor_page(session_id: str) -> HTMLResponse:
    session = registry.get(session_id)
    page = (
        EDITOR_TEMPLATE.replace("{{ palette }}", _palette_html())
        .replace("{{ canvas }}", render_canvas(session.layout, session.selected_id))
        .replace("{{ session_id }}", session.id)
    )
    return HTMLResponse(page)
