from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter()

# ─────────────────────────────────────────
#  ФРОНТЕНД (встроен)
# ─────────────────────────────────────────


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def serve_frontend():
    return HTML


HTML = """<!DOCTYPE html>
<html lang="ru">
<head>
  <meta charset="UTF-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1.0"/>
  <title>TaskFlow</title>
  <link href="https://fonts.googleapis.com/css2?family=Russo+One&family=Nunito:wght@400;500;600;700&subset=cyrillic&display=swap" rel="stylesheet"/>
  <style>
*,*::before,*::after{box-sizing:border-box;margin:0;padding:0}
:root{
  --bg:#0c0c0f;--surface:#13131a;--surface2:#1c1c28;
  --border:rgba(255,255,255,0.07);--border-hover:rgba(255,255,255,0.15);
  --accent:#c8f04d;--accent-dim:rgba(200,240,77,0.12);--accent-glow:rgba(200,240,77,0.25);
  --ai:#8f7bff;--ai-dim:rgba(143,123,255,0.12);
  --text:#f0f0f5;--text-muted:#6b6b82;--text-dim:#9999b3;
  --done:#3d3d55;--danger:#ff5a5a;--danger-dim:rgba(255,90,90,0.1);
  --warning:#ffaa32;--radius:16px;--radius-sm:8px;
  --font-d:'Russo One',sans-serif;--font-b:'Nunito',sans-serif;
}
body{background:var(--bg);color:var(--text);font-family:var(--font-b);min-height:100vh;line-height:1.6}
.app{max-width:820px;margin:0 auto;padding:40px 20px 80px}

/* AUTH */
.auth-wrap{display:flex;flex-direction:column;align-items:center;justify-content:center;min-height:80vh;gap:24px}
.auth-box{background:var(--surface);border:1px solid var(--border);border-radius:var(--radius);padding:36px;width:100%;max-width:420px}
.auth-title{font-family:var(--font-d);font-size:22px;margin-bottom:24px;color:var(--accent)}
.field{display:flex;flex-direction:column;gap:5px;margin-bottom:16px}
.field label{font-size:11px;font-weight:600;text-transform:uppercase;letter-spacing:.1em;color:var(--text-muted)}
.field input{background:var(--surface2);border:1px solid var(--border);border-radius:var(--radius-sm);padding:11px 14px;font-family:var(--font-b);font-size:14px;color:var(--text);outline:none;transition:border-color .2s}
.field input:focus{border-color:var(--accent)}
.field-row{display:grid;grid-template-columns:1fr 1fr;gap:10px}
.field-error{font-size:11px;color:var(--danger);margin-top:2px}
.btn{display:flex;align-items:center;justify-content:center;gap:8px;border:none;border-radius:var(--radius-sm);padding:12px 24px;font-family:var(--font-d);font-size:14px;cursor:pointer;transition:all .2s;width:100%}
.btn-primary{background:var(--accent);color:#0c0c0f}
.btn-primary:hover:not(:disabled){transform:translateY(-2px);box-shadow:0 8px 24px var(--accent-glow)}
.btn-ai{background:var(--ai);color:#0c0c0f}
.btn:disabled{opacity:.5;cursor:not-allowed}
.auth-switch{font-size:13px;color:var(--text-muted);text-align:center}
.auth-switch span{color:var(--accent);cursor:pointer;text-decoration:underline}

/* HEADER */
.header{display:flex;align-items:center;justify-content:space-between;margin-bottom:32px;flex-wrap:wrap;gap:12px}
.logo{font-family:var(--font-d);font-size:20px;color:var(--accent);display:flex;align-items:center;gap:8px}
.logo-dot{width:8px;height:8px;border-radius:50%;background:var(--accent);animation:pulse 2s infinite}
@keyframes pulse{0%,100%{opacity:1}50%{opacity:.4}}
.user-info{display:flex;align-items:center;gap:10px;font-size:13px;color:var(--text-muted)}
.btn-logout{background:none;border:1px solid var(--border);border-radius:var(--radius-sm);color:var(--text-muted);padding:6px 14px;cursor:pointer;font-size:12px;transition:all .2s}
.btn-logout:hover{border-color:var(--danger);color:var(--danger)}

/* FORMS */
.section-title{font-size:11px;font-weight:700;text-transform:uppercase;letter-spacing:.12em;color:var(--text-muted)}
.add-form{background:var(--surface);border:1px solid var(--border);border-radius:var(--radius);padding:22px;margin-bottom:20px;transition:border-color .3s}
.add-form:focus-within{border-color:var(--border-hover)}
.add-form.ai:focus-within{border-color:var(--ai)}
.form-grid{display:grid;grid-template-columns:1fr 170px;gap:10px;margin-bottom:14px}
@media(max-width:560px){.form-grid{grid-template-columns:1fr}}
.form-footer{display:flex;align-items:center;justify-content:flex-end}
.inp{background:var(--surface2);border:1px solid var(--border);border-radius:var(--radius-sm);padding:10px 13px;font-family:var(--font-b);font-size:14px;color:var(--text);outline:none;width:100%;transition:border-color .2s}
.inp:focus{border-color:var(--accent)}
select.inp{cursor:pointer}
.inp-label{font-size:10px;font-weight:700;text-transform:uppercase;letter-spacing:.1em;color:var(--text-muted);display:block;margin-bottom:4px}

/* FILTERS */
.filters{display:flex;align-items:center;gap:10px;margin-bottom:16px;flex-wrap:wrap}
.search-box{flex:1;min-width:160px;position:relative}
.search-box input{width:100%;background:var(--surface);border:1px solid var(--border);border-radius:var(--radius-sm);padding:9px 14px 9px 36px;font-family:var(--font-b);font-size:13px;color:var(--text);outline:none}
.search-icon{position:absolute;left:12px;top:50%;transform:translateY(-50%);color:var(--text-muted);font-size:14px;pointer-events:none}
.filter-tabs{display:flex;background:var(--surface);border:1px solid var(--border);border-radius:100px;padding:3px}
.ftab{background:none;border:none;color:var(--text-muted);font-size:12px;font-weight:600;padding:5px 12px;border-radius:100px;cursor:pointer;transition:all .2s}
.ftab.active{background:var(--surface2);color:var(--text)}
.sort-sel{width:auto;padding:7px 10px;font-size:12px}

/* TASK LIST */
.task-list{display:flex;flex-direction:column;gap:8px}
.task-card{background:var(--surface);border:1px solid var(--border);border-radius:var(--radius);padding:16px 18px;display:flex;align-items:center;gap:14px;animation:slideIn .25s ease both;transition:border-color .2s,transform .2s}
@keyframes slideIn{from{opacity:0;transform:translateY(10px)}to{opacity:1;transform:translateY(0)}}
.task-card:hover{border-color:var(--border-hover);transform:translateX(3px)}
.task-card.done{background:rgba(19,19,26,.5);border-color:rgba(255,255,255,.04)}
.toggle{width:22px;height:22px;min-width:22px;border-radius:50%;border:2px solid var(--border-hover);background:none;cursor:pointer;display:flex;align-items:center;justify-content:center;color:var(--accent);font-size:11px;font-weight:700;transition:all .2s}
.task-card.done .toggle{background:var(--accent-dim);border-color:var(--accent)}
.task-body{flex:1;min-width:0}
.task-title{font-size:14px;font-weight:600;white-space:nowrap;overflow:hidden;text-overflow:ellipsis;margin-bottom:4px}
.task-card.done .task-title{color:var(--done);text-decoration:line-through}
.task-desc{font-size:12px;color:var(--text-muted);white-space:nowrap;overflow:hidden;text-overflow:ellipsis;margin-bottom:5px}
.task-meta{display:flex;gap:6px;flex-wrap:wrap}
.chip{font-size:10px;color:var(--text-muted);background:var(--surface2);border-radius:4px;padding:2px 7px}
.chip.overdue{background:var(--danger-dim);color:var(--danger)}
.btn-del{background:none;border:1px solid transparent;border-radius:var(--radius-sm);color:var(--text-muted);cursor:pointer;font-size:13px;padding:6px 9px;transition:all .2s;line-height:1}
.btn-del:hover{background:var(--danger-dim);border-color:rgba(255,90,90,.25);color:var(--danger)}
.btn-edit{background:none;border:1px solid transparent;border-radius:var(--radius-sm);color:var(--text-muted);cursor:pointer;font-size:13px;padding:6px 9px;transition:all .2s;line-height:1}
.btn-edit:hover{background:var(--surface2);border-color:var(--border-hover);color:var(--text)}
.task-edit{flex:1;display:flex;flex-direction:column;gap:6px;min-width:0}
.task-edit input{background:var(--surface2);border:1px solid var(--border);border-radius:var(--radius-sm);padding:7px 10px;font-family:var(--font-b);font-size:13px;color:var(--text);outline:none}
.task-edit input:focus{border-color:var(--accent)}
.edit-actions{display:flex;gap:6px}
.edit-actions .btn{width:auto;padding:6px 14px;font-size:12px}
.btn-ghost{background:var(--surface2);color:var(--text-muted)}

/* PAGER */
.pager{display:flex;align-items:center;justify-content:center;gap:12px;margin-top:18px;font-size:12px;color:var(--text-muted)}
.pager button{background:var(--surface);border:1px solid var(--border);border-radius:var(--radius-sm);color:var(--text);padding:6px 14px;cursor:pointer}
.pager button:disabled{opacity:.4;cursor:not-allowed}

/* MISC */
.empty{text-align:center;padding:50px 20px;color:var(--text-muted)}
.empty p{font-family:var(--font-d);font-size:16px;color:var(--text-dim);margin-bottom:4px}
.loading{display:flex;flex-direction:column;align-items:center;padding:40px;gap:10px;color:var(--text-muted);font-size:13px}
.spinner{width:26px;height:26px;border:2px solid var(--border);border-top-color:var(--accent);border-radius:50%;animation:spin .7s linear infinite}
@keyframes spin{to{transform:rotate(360deg)}}
.hidden{display:none!important}
.toast{position:fixed;bottom:24px;left:50%;transform:translateX(-50%) translateY(100px);background:var(--surface2);border:1px solid var(--border);border-radius:100px;padding:11px 22px;font-size:13px;font-weight:500;box-shadow:0 12px 40px rgba(0,0,0,.5);transition:transform .3s cubic-bezier(.34,1.56,.64,1),opacity .3s;opacity:0;pointer-events:none;z-index:999;white-space:nowrap}
.toast.show{transform:translateX(-50%) translateY(0);opacity:1}
.toast.success{border-color:rgba(200,240,77,.3)}
.toast.error{border-color:rgba(255,90,90,.3);color:var(--danger)}
  </style>
</head>
<body>
<div class="app">

  <!-- АВТОРИЗАЦИЯ -->
  <div id="auth-section" class="auth-wrap">
    <div id="login-box" class="auth-box">
      <div class="auth-title">Вход в TaskFlow</div>
      <div class="field">
        <label>Email</label>
        <input id="l-email" type="email" placeholder="example@mail.com" autocomplete="email"/>
      </div>
      <div class="field">
        <label>Пароль</label>
        <input id="l-password" type="password" placeholder="••••••••" autocomplete="current-password"/>
      </div>
      <button class="btn btn-primary" id="btn-login" onclick="doLogin()">Войти</button>
      <div class="auth-switch" style="margin-top:16px">Нет аккаунта? <span onclick="showRegister()">Зарегистрироваться</span></div>
    </div>

    <div id="register-box" class="auth-box hidden">
      <div class="auth-title">Регистрация</div>
      <div class="field-row">
        <div class="field">
          <label>Имя</label>
          <input id="r-first" type="text"/>
        </div>
        <div class="field">
          <label>Фамилия</label>
          <input id="r-last" type="text"/>
        </div>
      </div>
      <div class="field">
        <label>Email</label>
        <input id="r-email" type="email" placeholder="example@mail.com"/>
      </div>
      <div class="field">
        <label>Пароль (минимум 8 символов)</label>
        <input id="r-password" type="password" placeholder="••••••••"/>
      </div>
      <div class="field">
        <label>Повторите пароль</label>
        <input id="r-password2" type="password" placeholder="••••••••"/>
        <span class="field-error hidden" id="r-err"></span>
      </div>
      <button class="btn btn-primary" onclick="doRegister()">Создать аккаунт</button>
      <div class="auth-switch" style="margin-top:16px">Уже есть аккаунт? <span onclick="showLogin()">Войти</span></div>
    </div>
  </div>

  <!-- ОСНОВНОЕ ПРИЛОЖЕНИЕ -->
  <div id="main-section" class="hidden">
    <div class="header">
      <div class="logo"><span class="logo-dot"></span>TaskFlow</div>
      <div class="user-info">
        <span id="username-display"></span>
        <button class="btn-logout" onclick="doLogout()">Выйти</button>
      </div>
    </div>

    <!-- НОВАЯ ЗАДАЧА -->
    <div class="add-form">
      <div class="section-title" style="margin-bottom:14px">✦ Новая задача</div>
      <div class="form-grid">
        <div>
          <span class="inp-label">Название *</span>
          <input class="inp" id="t-title" type="text" placeholder="Что нужно сделать?" maxlength="255"/>
        </div>
        <div>
          <span class="inp-label">Срок</span>
          <input class="inp" id="t-due" type="date"/>
        </div>
      </div>
      <div style="margin-bottom:14px">
        <span class="inp-label">Описание (необязательно)</span>
        <input class="inp" id="t-desc" type="text" placeholder="Подробности..."/>
      </div>
      <div class="form-footer">
        <button class="btn btn-primary" style="width:auto;padding:11px 28px" id="btn-add" onclick="addTask()">+ Добавить задачу</button>
      </div>
    </div>

    <!-- ГЕНЕРАЦИЯ ЧЕРЕЗ ИИ -->
    <div class="add-form ai">
      <div class="section-title" style="margin-bottom:14px">✧ Задачи по теме (ИИ)</div>
      <div style="margin-bottom:14px">
        <input class="inp" id="ai-topic" type="text" placeholder="Например: переезд в новую квартиру" maxlength="255"/>
      </div>
      <div class="form-footer">
        <button class="btn btn-ai" style="width:auto;padding:11px 28px" id="btn-ai" onclick="generateTasks()">Сгенерировать</button>
      </div>
    </div>

    <!-- ФИЛЬТРЫ -->
    <div class="filters">
      <div class="search-box">
        <span class="search-icon">🔍</span>
        <input id="search-inp" type="text" placeholder="Поиск по названию..." oninput="onSearch()"/>
      </div>
      <div class="filter-tabs">
        <button class="ftab active" onclick="setFilter('',this)">Все</button>
        <button class="ftab" onclick="setFilter('false',this)">Активные</button>
        <button class="ftab" onclick="setFilter('true',this)">Выполненные</button>
      </div>
      <select class="inp sort-sel" id="sort-sel" onchange="onSort()">
        <option value="">По порядку</option>
        <option value="created_at:desc">Сначала новые</option>
        <option value="created_at:asc">Сначала старые</option>
        <option value="due_date:asc">Срок ↑</option>
        <option value="due_date:desc">Срок ↓</option>
      </select>
    </div>

    <div id="task-list" class="task-list">
      <div class="loading"><div class="spinner"></div><p>Загрузка...</p></div>
    </div>
    <div id="empty" class="empty hidden">
      <p>Задач нет</p>
      <span>Добавьте задачу или сгенерируйте по теме</span>
    </div>
    <div id="pager" class="pager hidden">
      <button id="pg-prev" onclick="goPage(-1)">←</button>
      <span id="pg-info"></span>
      <button id="pg-next" onclick="goPage(1)">→</button>
    </div>
  </div>

</div>
<div id="toast" class="toast"></div>

<script>
const API = '';
const PER_PAGE = 10;
let token = localStorage.getItem('auth_token') || '';
let tasks = [], page = 1, lastPage = 1;
let filterCompleted = '', searchQ = '', sortVal = '';
let searchTimer = null;

window.onload = () => {
  if (token) { showApp(); loadMe(); loadTasks(); }
  else showAuth();
};

// ── АВТ ──
function showAuth(){ document.getElementById('auth-section').classList.remove('hidden'); document.getElementById('main-section').classList.add('hidden'); }
function showApp(){ document.getElementById('auth-section').classList.add('hidden'); document.getElementById('main-section').classList.remove('hidden'); }
function showLogin(){ document.getElementById('login-box').classList.remove('hidden'); document.getElementById('register-box').classList.add('hidden'); }
function showRegister(){ document.getElementById('login-box').classList.add('hidden'); document.getElementById('register-box').classList.remove('hidden'); }

async function doLogin(){
  const email = document.getElementById('l-email').value.trim();
  const password = document.getElementById('l-password').value;
  if(!email||!password){ toast('Заполните все поля','error'); return; }
  const btn = document.getElementById('btn-login');
  btn.disabled = true; btn.textContent = 'Вход...';
  try{
    const res = await api('POST','/login',{email,password});
    token = res.token;
    localStorage.setItem('auth_token', token);
    showApp(); loadMe(); page = 1; loadTasks();
  }catch(e){ toast(e.message,'error'); }
  finally{ btn.disabled=false; btn.textContent='Войти'; }
}

async function doRegister(){
  const body = {
    first_name: document.getElementById('r-first').value.trim(),
    last_name: document.getElementById('r-last').value.trim(),
    email: document.getElementById('r-email').value.trim(),
    password: document.getElementById('r-password').value,
    password_confirmation: document.getElementById('r-password2').value,
  };
  if(!body.first_name||!body.last_name||!body.email){ showErr('Заполните все поля'); return; }
  if(body.password.length<8){ showErr('Минимум 8 символов'); return; }
  if(body.password!==body.password_confirmation){ showErr('Пароли не совпадают'); return; }
  hideErr();
  try{
    await api('POST','/register',body);
    document.getElementById('l-email').value = body.email;
    showLogin(); toast('Аккаунт создан, войдите');
  }catch(err){ showErr(err.message); }
}

async function doLogout(){
  try{ await api('POST','/logout'); }catch(e){}
  token='';
  localStorage.removeItem('auth_token');
  tasks=[]; showAuth(); showLogin();
  toast('Вы вышли из аккаунта');
}

async function loadMe(){
  try{
    const me = await api('GET','/me');
    document.getElementById('username-display').textContent = '👤 ' + me.nickname;
  }catch(e){}
}

function showErr(msg){ const el=document.getElementById('r-err'); el.textContent=msg; el.classList.remove('hidden'); }
function hideErr(){ document.getElementById('r-err').classList.add('hidden'); }

// ── ЗАДАЧИ ──
async function loadTasks(){
  showLoading(true);
  const q = new URLSearchParams({page, per_page: PER_PAGE});
  if(filterCompleted) q.set('completed', filterCompleted);
  if(searchQ) q.set('title', searchQ);
  if(sortVal){ const [s,d] = sortVal.split(':'); q.set('sort', s); q.set('dir', d); }
  try{
    const res = await api('GET','/tasks?'+q.toString());
    tasks = res.data; lastPage = res.last_page;
    if(page > lastPage){ page = lastPage; return loadTasks(); }
    renderTasks(res);
  }catch(e){ showLoading(false); }
}

function renderTasks(res){
  const list = document.getElementById('task-list');
  showLoading(false);
  list.innerHTML='';
  document.getElementById('empty').classList.toggle('hidden', tasks.length>0);
  const pager = document.getElementById('pager');
  pager.classList.toggle('hidden', res.total<=res.per_page);
  document.getElementById('pg-info').textContent = res.current_page+' / '+res.last_page+' · всего '+res.total;
  document.getElementById('pg-prev').disabled = res.current_page<=1;
  document.getElementById('pg-next').disabled = res.current_page>=res.last_page;
  tasks.forEach((t,i) => list.appendChild(createCard(t,i)));
}

function createCard(task, i){
  const today = new Date().toISOString().slice(0,10);
  const overdue = task.due_date && !task.completed && task.due_date < today;
  const card = document.createElement('div');
  card.className = 'task-card'+(task.completed?' done':'');
  card.style.animationDelay = i*35+'ms';
  card.innerHTML = `
    <button class="toggle" title="${task.completed?'Вернуть в работу':'Отметить выполненной'}">${task.completed?'✓':''}</button>
    <div class="task-body">
      <div class="task-title">${esc(task.title)}</div>
      ${task.description?`<div class="task-desc">${esc(task.description)}</div>`:''}
      <div class="task-meta">
        ${task.due_date?`<span class="chip${overdue?' overdue':''}">📅 ${esc(task.due_date)}</span>`:''}
        <span class="chip">#${task.id}</span>
      </div>
    </div>
    <button class="btn-edit" title="Редактировать">✎</button>
    <button class="btn-del" title="Удалить">✕</button>`;
  card.querySelector('.toggle').onclick = () => toggleTask(task);
  card.querySelector('.btn-edit').onclick = () => editTask(task, card);
  card.querySelector('.btn-del').onclick = () => deleteTask(task.id, card);
  return card;
}

async function addTask(){
  const title = document.getElementById('t-title').value.trim();
  const description = document.getElementById('t-desc').value.trim();
  const due = document.getElementById('t-due').value;
  if(!title){ toast('Введите название задачи','error'); document.getElementById('t-title').focus(); return; }
  const btn = document.getElementById('btn-add');
  btn.disabled=true; btn.textContent='Отправка...';
  try{
    const body = {title};
    if(description) body.description=description;
    if(due) body.due_date=due;
    await api('POST','/tasks',body);
    document.getElementById('t-title').value='';
    document.getElementById('t-desc').value='';
    document.getElementById('t-due').value='';
    loadTasks(); toast('✦ Задача добавлена!');
  }catch(e){ toast(e.message,'error'); }
  finally{ btn.disabled=false; btn.textContent='+ Добавить задачу'; }
}

async function generateTasks(){
  const topic = document.getElementById('ai-topic').value.trim();
  if(!topic){ toast('Введите тему','error'); return; }
  const btn = document.getElementById('btn-ai');
  btn.disabled=true; btn.textContent='Генерация...';
  try{
    const created = await api('POST','/tasks/generate-ai',{topic});
    document.getElementById('ai-topic').value='';
    loadTasks(); toast('✧ Создано задач: '+created.length);
  }catch(e){ toast(e.message,'error'); }
  finally{ btn.disabled=false; btn.textContent='Сгенерировать'; }
}

async function deleteTask(id, card){
  if(!confirm('Удалить задачу?')) return;
  card.style.cssText+='transition:opacity .2s,transform .2s;opacity:0;transform:translateX(28px)';
  try{
    await api('DELETE','/tasks/'+id);
    setTimeout(loadTasks, 220); toast('Задача удалена');
  }catch(e){ card.style.opacity='1'; card.style.transform=''; toast(e.message,'error'); }
}

async function toggleTask(task){
  try{
    await api('PATCH','/tasks/'+task.id,{completed:!task.completed});
    toast(task.completed?'● Возвращено в работу':'✓ Выполнено');
  }catch(e){ toast(e.message,'error'); }
  loadTasks();
}

// ── РЕДАКТИРОВАНИЕ ──
function editTask(task, card){
  const body = card.querySelector('.task-body');
  const form = document.createElement('div');
  form.className = 'task-edit';
  form.innerHTML = `
    <input class="e-title" value="${esc(task.title)}" placeholder="Название"/>
    <input class="e-desc" value="${esc(task.description||'')}" placeholder="Описание"/>
    <input class="e-due" type="date" value="${esc(task.due_date||'')}"/>
    <div class="edit-actions">
      <button class="btn btn-primary e-save">Сохранить</button>
      <button class="btn btn-ghost e-cancel">Отмена</button>
    </div>`;
  body.replaceWith(form);
  card.querySelector('.btn-edit').classList.add('hidden');
  form.querySelector('.e-save').onclick = () => saveEdit(task, form);
  form.querySelector('.e-cancel').onclick = () => loadTasks();
  form.querySelector('.e-title').focus();
}

async function saveEdit(task, form){
  const title = form.querySelector('.e-title').value.trim();
  if(!title){ toast('Введите название задачи','error'); return; }
  const changes = {
    title,
    description: form.querySelector('.e-desc').value.trim() || null,
    due_date: form.querySelector('.e-due').value || null,
  };
  const btn = form.querySelector('.e-save');
  btn.disabled=true;
  try{
    await api('PATCH','/tasks/'+task.id,changes);
    toast('✎ Задача обновлена'); loadTasks();
  }catch(e){ btn.disabled=false; toast(e.message,'error'); }
}

// ── ФИЛЬТРЫ ──
function setFilter(val, btn){
  filterCompleted=val; page=1;
  document.querySelectorAll('.ftab').forEach(b=>b.classList.remove('active'));
  btn.classList.add('active'); loadTasks();
}

function onSort(){ sortVal=document.getElementById('sort-sel').value; page=1; loadTasks(); }

function onSearch(){
  clearTimeout(searchTimer);
  searchTimer = setTimeout(()=>{ searchQ=document.getElementById('search-inp').value.trim(); page=1; loadTasks(); }, 350);
}

function goPage(delta){ page=Math.min(Math.max(1,page+delta),lastPage); loadTasks(); }

// ── УТИЛИТЫ ──
async function api(method, url, body){
  const opts = { method, headers:{'Content-Type':'application/json','Accept':'application/json'} };
  if(token) opts.headers['Authorization']='Bearer '+token;
  if(body) opts.body=JSON.stringify(body);
  const res = await fetch(API+url, opts);
  if(res.status===401 && token && url!=='/logout'){
    token=''; localStorage.removeItem('auth_token'); showAuth(); showLogin();
  }
  if(res.status===204) return {};
  const data = await res.json().catch(()=>({}));
  if(!res.ok) throw new Error(data.message||'Ошибка сервера');
  return data;
}

function showLoading(show){
  const list=document.getElementById('task-list');
  const loading=list.querySelector('.loading');
  if(show&&!loading) list.innerHTML='<div class="loading"><div class="spinner"></div><p>Загрузка...</p></div>';
  else if(!show&&loading) loading.remove();
}

let tTimer;
function toast(msg,type='success'){
  const t=document.getElementById('toast');
  t.textContent=msg; t.className='toast '+type+' show';
  clearTimeout(tTimer); tTimer=setTimeout(()=>t.classList.remove('show'),2800);
}

function esc(s){ return String(s).replace(/&/g,'&amp;').replace(/</g,'&lt;').replace(/>/g,'&gt;').replace(/"/g,'&quot;'); }
</script>
</body>
</html>"""
