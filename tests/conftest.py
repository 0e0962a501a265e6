"""
Shared fixtures: mocked collaborators and a workbench wired to them.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from pseudoide.coding.assistant import BaseAssistant, TranscriptionResult
from pseudoide.host.base import BaseHost, FileEntry
from pseudoide.session.workbench import Workbench


@pytest.fixture
def fake_assistant():
    assistant = MagicMock(spec=BaseAssistant)
    assistant.transcribe = AsyncMock(
        return_value=TranscriptionResult(language="rust", code='fn main() {\n    println!("hi");\n}')
    )
    assistant.chat = AsyncMock(return_value="Sure!\n```python\nprint(1)\n```")
    return assistant


@pytest.fixture
def fake_host():
    host = MagicMock(spec=BaseHost)
    host.read_file = AsyncMock(return_value="print('hi')\n")
    host.write_file = AsyncMock(return_value=None)
    host.list_directory = AsyncMock(return_value=[
        FileEntry(name="src", path="/work/src", is_dir=True),
        FileEntry(name="main.py", path="/work/main.py", is_dir=False),
    ])
    host.execute = AsyncMock(return_value="hi\n")
    host.run_command = AsyncMock(return_value="ok")
    host.change_directory = MagicMock(return_value=Path("/work/other"))
    host.init_project = AsyncMock(return_value=Path("/projects/demo"))
    return host


@pytest.fixture
def workbench(fake_assistant, fake_host):
    return Workbench(fake_assistant, fake_host)
