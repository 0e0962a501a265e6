"""PseudoIDE Workbench — Main Application

HTTP surface for the editor UI: session panes, transcription, the
assistant chat, file access, runs and the terminal.
"""

import logging
import uuid
from typing import Optional

import aiohttp
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from pseudoide.coding.assistant import LLMAssistant
from pseudoide.config import load_config, WorkbenchConfig
from pseudoide.host.base import HostError, ProjectData
from pseudoide.host.local import LocalHost
from pseudoide.providers.base import BaseProvider
from pseudoide.providers.llama_server import LlamaServerProvider
from pseudoide.providers.openai_compat import OpenAICompatProvider
from pseudoide.session.state import Pane
from pseudoide.session.workbench import Workbench

# ─── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("pseudoide")

# ─── Constants ────────────────────────────────────────────────────────────────

API_PREFIX = "/pseudoide/v1"

# ─── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="PseudoIDE Workbench",
    docs_url=None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── State ────────────────────────────────────────────────────────────────────

_config: Optional[WorkbenchConfig] = None
_session: Optional[aiohttp.ClientSession] = None
_host: Optional[LocalHost] = None
_workbench: Optional[Workbench] = None


def build_provider(config: WorkbenchConfig, session: aiohttp.ClientSession) -> BaseProvider:
    pc = config.provider
    provider_cls = OpenAICompatProvider if pc.format == "openai" else LlamaServerProvider
    return provider_cls(
        name=pc.name,
        base_url=pc.base_url,
        api_key=pc.api_key,
        default_model=pc.model_id,
        session=session,
        timeout=pc.timeout,
    )


@app.on_event("startup")
async def startup() -> None:
    global _config, _session, _host, _workbench

    logger.info("Starting PseudoIDE Workbench...")
    _config = load_config()
    _session = aiohttp.ClientSession()

    provider = build_provider(_config, _session)
    if not await provider.health_check():
        logger.warning("LLM server %s not reachable yet — transcription and chat will fail until it is", provider.base_url)

    _host = LocalHost(_config)
    try:
        _host.open_workspace()
    except HostError as e:
        logger.warning("Workspace %s unusable (%s), using testing grounds", _config.workspace, e)
        _host.ensure_testing_grounds()

    _workbench = Workbench(LLMAssistant(provider, _config.provider), _host)
    _workbench.log(f"> Initialized Testing Grounds at: {_host.cwd}\n")

    logger.info("PseudoIDE Workbench ready — provider=%r cwd=%s", provider, _host.cwd)


@app.on_event("shutdown")
async def shutdown() -> None:
    global _session
    if _session:
        await _session.close()
    logger.info("PseudoIDE Workbench shut down.")


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _require_workbench() -> Workbench:
    if _workbench is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _workbench


async def _body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="JSON object expected")
    return body


def _text_field(body: dict, key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{key} is required")
    return value


def _snapshot(wb: Workbench) -> dict:
    return {
        **wb.state.to_dict(),
        "is_transcribing": wb.is_transcribing,
        "is_running": wb.is_running,
        "is_thinking": wb.is_thinking,
    }


# ─── Health ───────────────────────────────────────────────────────────────────

@app.get(f"{API_PREFIX}/health")
async def health() -> dict:
    return {
        "status": "ok" if _workbench else "starting",
        "service": "pseudoide-workbench",
        "cwd": str(_host.cwd) if _host else None,
    }


# ─── Session ──────────────────────────────────────────────────────────────────

@app.get(f"{API_PREFIX}/session")
async def get_session() -> dict:
    return _snapshot(_require_workbench())


@app.put(f"{API_PREFIX}/session/pseudocode")
async def put_pseudocode(request: Request) -> dict:
    wb = _require_workbench()
    wb.edit(Pane.PSEUDOCODE, _text_field(await _body(request), "text"))
    return _snapshot(wb)


@app.put(f"{API_PREFIX}/session/code")
async def put_code(request: Request) -> dict:
    wb = _require_workbench()
    wb.edit(Pane.GENERATED, _text_field(await _body(request), "text"))
    return _snapshot(wb)


@app.put(f"{API_PREFIX}/session/language")
async def put_language(request: Request) -> dict:
    wb = _require_workbench()
    wb.select_language(_text_field(await _body(request), "language"))
    return _snapshot(wb)


# ─── Transcription ────────────────────────────────────────────────────────────

@app.post(f"{API_PREFIX}/transcribe")
async def transcribe() -> dict:
    wb = _require_workbench()
    req_id = uuid.uuid4().hex[:8]
    logger.info("[%s] Transcribe: pseudocode chars=%d", req_id, len(wb.state.pseudocode))
    await wb.transcribe()
    logger.info("[%s] Transcribe done: language=%s", req_id, wb.state.generated_language)
    return _snapshot(wb)


# ─── Chat ─────────────────────────────────────────────────────────────────────

@app.get(f"{API_PREFIX}/chat")
async def get_chat() -> dict:
    wb = _require_workbench()
    return {"messages": [m.to_dict() for m in wb.messages], "is_thinking": wb.is_thinking}


@app.post(f"{API_PREFIX}/chat")
async def post_chat(request: Request) -> dict:
    wb = _require_workbench()
    text = _text_field(await _body(request), "message")
    req_id = uuid.uuid4().hex[:8]
    logger.info("[%s] Chat: '%s'", req_id, text[:80])

    parsed = await wb.send_chat(text)
    return {
        "messages": [m.to_dict() for m in wb.messages],
        "editor_updated": bool(parsed and parsed.has_code),
        "session": _snapshot(wb),
    }


# ─── Files ────────────────────────────────────────────────────────────────────

@app.get(f"{API_PREFIX}/files")
async def list_files(path: str = "") -> dict:
    wb = _require_workbench()
    entries = await wb.list_directory(path)
    return {"entries": [e.to_dict() for e in entries]}


@app.post(f"{API_PREFIX}/files/open")
async def open_file(request: Request) -> dict:
    wb = _require_workbench()
    body = await _body(request)
    path = _text_field(body, "path")
    name = body.get("name") if isinstance(body.get("name"), str) else None
    await wb.open_file(path, name)
    return _snapshot(wb)


@app.post(f"{API_PREFIX}/files/save")
async def save_file(request: Request) -> dict:
    wb = _require_workbench()
    body = await _body(request)
    ok = await wb.save_file(_text_field(body, "path"), _text_field(body, "content"))
    return {"ok": ok}


@app.post(f"{API_PREFIX}/project/create")
async def create_project(request: Request) -> dict:
    wb = _require_workbench()
    body = await _body(request)
    data = ProjectData(
        name=_text_field(body, "name"),
        description=str(body.get("description") or ""),
        intent=str(body.get("intent") or ""),
        requirements=str(body.get("requirements") or ""),
    )
    cwd = await wb.create_project(data)
    if cwd is None:
        raise HTTPException(status_code=400, detail="Could not create project")
    return {"project": data.name, "cwd": str(cwd)}


@app.post(f"{API_PREFIX}/project/open")
async def open_project(request: Request) -> dict:
    wb = _require_workbench()
    cwd = wb.open_project(_text_field(await _body(request), "path"))
    if cwd is None:
        raise HTTPException(status_code=400, detail="Could not open project directory")
    return {"project": cwd.name, "cwd": str(cwd)}


# ─── Run + terminal ───────────────────────────────────────────────────────────

@app.post(f"{API_PREFIX}/run")
async def run() -> dict:
    wb = _require_workbench()
    outcome = await wb.run()
    if outcome is None:
        raise HTTPException(status_code=409, detail="A run is already in progress")
    return {**outcome.to_dict(), "session": _snapshot(wb)}


@app.get(f"{API_PREFIX}/terminal")
async def get_terminal() -> dict:
    return {"output": _require_workbench().terminal_output}


@app.post(f"{API_PREFIX}/terminal")
async def post_terminal(request: Request) -> dict:
    wb = _require_workbench()
    output = await wb.run_command(_text_field(await _body(request), "command"))
    return {"output": output}
