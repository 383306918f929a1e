from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence

import pytest

from cytonaut_bootstrap.config import BootstrapConfig
from cytonaut_bootstrap.errors import ExternalTaskFailed
from cytonaut_bootstrap.lib.command import CmdResult
from cytonaut_bootstrap.lib.rlang import MARKER


@dataclass
class Call:
    argv: List[str]
    cwd: Optional[str]
    env: Optional[Dict[str, str]]
    capture: bool


@dataclass
class Rule:
    tokens: Sequence[str]
    returncode: int = 0
    stdout: str = ""
    side_effect: Optional[Callable[[List[str]], None]] = None


class FakeRunner:
    """Stands in for run_cmd: records calls and answers from scripted rules."""

    def __init__(self) -> None:
        self.calls: List[Call] = []
        self.rules: List[Rule] = []

    def when(self, *tokens: str, returncode: int = 0, stdout: str = "", side_effect=None) -> None:
        self.rules.insert(0, Rule(tokens, returncode, stdout, side_effect))

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        capture: bool = True,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
        dry_run: bool = False,
    ) -> CmdResult:
        argv_list = list(argv)
        self.calls.append(Call(argv_list, cwd, dict(env) if env else None, capture))
        if dry_run:
            return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

        rc, out = 0, ""
        for rule in self.rules:
            if all(t in argv_list for t in rule.tokens):
                if rule.side_effect is not None:
                    rule.side_effect(argv_list)
                rc, out = rule.returncode, rule.stdout
                break

        if check and rc != 0:
            raise ExternalTaskFailed(argv_list, rc, "")
        return CmdResult(argv=argv_list, returncode=rc, stdout=out, stderr="")

    def argvs(self) -> List[List[str]]:
        return [c.argv for c in self.calls]

    def ran(self, *tokens: str) -> bool:
        return any(all(t in argv for t in tokens) for argv in self.argvs())


class FakeWhich:
    """Pretends ``pixi`` lives in any directory listed in ``present``."""

    def __init__(self) -> None:
        self.present: set[str] = set()

    def __call__(self, name: str, *, search_path: Optional[str] = None) -> Optional[str]:
        for d in (search_path or "").split(os.pathsep):
            if d and d in self.present:
                return os.path.join(d, name)
        return None


def r_output(statuses: Mapping[str, bool]) -> str:
    return "".join(f"{MARKER}\t{name}\t{'TRUE' if ok else 'FALSE'}\n" for name, ok in statuses.items())


@pytest.fixture
def runner(monkeypatch) -> FakeRunner:
    fake = FakeRunner()
    fake.when("--version", stdout="pixi 0.40.0\n")
    monkeypatch.setattr("cytonaut_bootstrap.lib.pixi.run_cmd", fake)
    return fake


@pytest.fixture
def which(monkeypatch) -> FakeWhich:
    fake = FakeWhich()
    monkeypatch.setattr("cytonaut_bootstrap.lib.pixi.find_executable", fake)
    return fake


@pytest.fixture
def project(tmp_path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    (root / "pixi.toml").write_text('[project]\nname = "cytonaut"\n', encoding="utf-8")
    return root


@pytest.fixture
def cfg(tmp_path) -> BootstrapConfig:
    return BootstrapConfig(
        install_dir=str(tmp_path / "home" / ".pixi" / "bin"),
        packages=("Seurat", "ggplot2", "here"),
    )


@pytest.fixture
def rout():
    return r_output


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger()
    for h in list(getattr(root, "_cytonaut_handlers", [])):
        root.removeHandler(h)
        h.close()
    setattr(root, "_cytonaut_handlers", [])


def _read_report(path) -> dict:
    import json

    import yaml

    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        return yaml.safe_load(text) or {}
    return json.loads(text)


@pytest.fixture
def read_report():
    return _read_report
