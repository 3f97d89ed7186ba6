# tests/cli/test_main.py
"""
Testes do entry point `ci-taskmap`.

O CLI é exercitado in-process, com stdin/stdout/stderr em memória.
`git`, `tred` e `dot` nunca são executados: os pontos de integração são
substituídos via monkeypatch.

Os testes asseguram que:
- o DOT é escrito em stdout e os warnings em stderr
- erros de entrada e de grafo retornam exit code 1 com `error:`/`hint:`
- falhas de ferramenta externa retornam exit code 3
- flags e arquivo de opções chegam ao GraphEmitter
"""

import io
import json
from pathlib import Path

import pytest

import ci_taskmap.cli.main as cli
from ci_taskmap.cli.pipeline import ExternalToolError
from ci_taskmap.core.metadata import StaticGitMetadata

LINEAR_YAML = """\
lint_task: {}
build_task:
    depends_on: [lint]
test_task:
    depends_on: build
"""


def _run(argv, stdin_text=""):
    out, err = io.StringIO(), io.StringIO()
    code = cli.main(argv, stdin=io.StringIO(stdin_text), stdout=out, stderr=err)
    return code, out.getvalue(), err.getvalue()


@pytest.fixture
def ci_file(tmp_path: Path) -> Path:
    p = tmp_path / ".cirrus.yml"
    p.write_text(LINEAR_YAML, encoding="utf-8")
    return p


def test_dot_written_to_stdout(ci_file):
    code, out, err = _run([str(ci_file), "--no-title"])
    assert code == 0
    assert err == ""
    assert out.splitlines() == [
        "strict digraph X {",
        '  graph [fontname="Courier" rankdir=LR ratio=0.7]',
        '  "lint" [shape=box style="bold,rounded" color=blue fontcolor=blue]',
        '  "lint" -> "build" [color=blue]',
        '  "build" [shape=box style="bold,rounded" color=red fontcolor=red]',
        '  "build" -> "test" [color=red]',
        '  "test" [shape=box style="bold,rounded" color=darkgreen fontcolor=darkgreen]',
        "}",
    ]


def test_document_from_stdin():
    code, out, _ = _run(["-", "--no-title"], stdin_text=LINEAR_YAML)
    assert code == 0
    assert '"lint" -> "build"' in out


def test_title_from_flags_skips_git(ci_file, monkeypatch):
    def _boom(*a, **kw):
        raise AssertionError("git must not be consulted")

    monkeypatch.setattr(cli, "GitCommandMetadata", _boom)
    code, out, _ = _run([str(ci_file), "--repo", "containers/podman", "--branch", "main", "--rev", "abc123"])
    assert code == 0
    assert '  label="containers/podman: main @ abc123"' in out.splitlines()


def test_title_from_git_provider(ci_file, monkeypatch):
    seen = {}

    def _provider(cwd):
        seen["cwd"] = cwd
        return StaticGitMetadata(repo_name="containers/podman", branch_name="main", revision="abc123")

    monkeypatch.setattr(cli, "GitCommandMetadata", _provider)
    code, out, _ = _run([str(ci_file), "--rev", "fffffff"])
    assert code == 0
    assert seen["cwd"] == ci_file.resolve().parent
    assert '  label="containers/podman: main @ fffffff"' in out


def test_unresolved_reference_exit_code(tmp_path):
    p = tmp_path / "ci.yml"
    p.write_text("a_task:\n    depends_on: [nope]\n", encoding="utf-8")
    code, out, err = _run([str(p), "--no-title"])
    assert code == cli.EXIT_CONFIG_ERROR
    assert out == ""
    assert err.startswith("error: UNRESOLVED_REFERENCE:")
    assert "hint:" in err


def test_malformed_depends_on_exit_code():
    code, out, err = _run(["-", "--no-title"], stdin_text="a_task: {}\nb_task:\n    depends_on: 5\n")
    assert code == cli.EXIT_CONFIG_ERROR
    assert out == ""
    assert err.startswith("error: ")
    assert "b_task" in err


def test_missing_document(tmp_path):
    code, _, err = _run([str(tmp_path / "missing.yml")])
    assert code == cli.EXIT_CONFIG_ERROR
    assert err.startswith("error:")


def test_invalid_yaml_from_stdin():
    code, _, err = _run(["-"], stdin_text="a_task: [unclosed\n")
    assert code == cli.EXIT_CONFIG_ERROR
    assert "YAML" in err


def test_strict_rejects_cycles():
    cyclic = "a_task:\n    depends_on: [b]\nb_task:\n    depends_on: [a]\n"
    code, _, _ = _run(["-", "--no-title"], stdin_text=cyclic)
    assert code == 0
    code, _, err = _run(["-", "--no-title", "--strict"], stdin_text=cyclic)
    assert code == cli.EXIT_CONFIG_ERROR
    assert err.startswith("error: DEPENDENCY_CYCLE:")


def test_warnings_go_to_stderr():
    code, out, err = _run(["-", "--no-title"], stdin_text="t_task:\n    matrix: oops\n")
    assert code == 0
    assert out.startswith("strict digraph X {")
    assert err.startswith("warning: MALFORMED_MATRIX_SHAPE:")


def test_options_file(tmp_path, ci_file):
    opts = tmp_path / "opts.yml"
    opts.write_text("title: false\npalette: [purple]\nfallback_color: gray\n", encoding="utf-8")
    code, out, err = _run([str(ci_file), "--options", str(opts)])
    assert code == 0
    assert "color=purple fontcolor=purple" in out
    assert "color=gray fontcolor=gray" in out
    assert err.count("warning: PALETTE_EXHAUSTED:") == 1


def test_unknown_option_key(tmp_path, ci_file):
    opts = tmp_path / "opts.yml"
    opts.write_text("colour: red\n", encoding="utf-8")
    code, _, err = _run([str(ci_file), "--options", str(opts)])
    assert code == cli.EXIT_CONFIG_ERROR
    assert "colour" in err


def test_verbose_prints_json_events(ci_file):
    code, _, err = _run([str(ci_file), "--no-title", "-v", "-d"])
    assert code == 0
    events = [json.loads(line) for line in err.splitlines()]
    assert {e["level"] for e in events} == {"DEBUG"}
    assert [e["task"] for e in events if e["message"] == "node"] == ["lint", "build", "test"]


def test_reduce_pipes_through_tred(ci_file, monkeypatch):
    received = []

    def _fake_reduce(dot_text):
        received.append(dot_text)
        return "strict digraph X {\n}\n"

    monkeypatch.setattr(cli, "reduce_transitive", _fake_reduce)
    code, out, _ = _run([str(ci_file), "--no-title", "--reduce"])
    assert code == 0
    assert out == "strict digraph X {\n}\n"
    assert received[0].startswith("strict digraph X {")


def test_output_renders_image(ci_file, tmp_path, monkeypatch):
    calls = []

    def _fake_render(dot_text, output, *, image_format, reduce):
        calls.append((output, image_format, reduce))
        return Path(output)

    monkeypatch.setattr(cli, "render_image", _fake_render)
    target = str(tmp_path / "tasks.svg")
    code, out, _ = _run([str(ci_file), "--no-title", "-o", target, "--format", "svg", "-r"])
    assert code == 0
    assert out == ""
    assert calls == [(target, "svg", True)]


def test_external_tool_failure(ci_file, monkeypatch):
    def _fail(*a, **kw):
        raise ExternalToolError("dot", "command not found (is graphviz installed?)")

    monkeypatch.setattr(cli, "render_image", _fail)
    code, _, err = _run([str(ci_file), "--no-title", "-o", "x.png"])
    assert code == cli.EXIT_TOOL_ERROR
    assert err.strip() == "error: dot: command not found (is graphviz installed?)"
