# tests/core/graph/test_task.py
"""
Testes da entidade Task.

Os testes asseguram que:
- o sufixo `_task` é removido do nome interno
- a task genérica `task` usa o alias quando declarado
- start node ⇔ `depends_on` vazio
- matrizes malformadas viram warnings não fatais e são ignoradas
- sub-labels de variantes e de ambiente são produzidos em ordem
"""

import pytest

from ci_taskmap.core.config.errors import InvalidConfigRootTypeError
from ci_taskmap.core.errors import MALFORMED_MATRIX_SHAPE
from ci_taskmap.core.graph.task import EnvMatrix, Task, is_task_key


@pytest.mark.parametrize(
    "key, expected",
    [("lint_task", True), ("task", True), ("unit_test_task", True), ("env", False), ("tasks", False), ("my_task_x", False)],
)
def test_is_task_key(key, expected):
    assert is_task_key(key) is expected


def test_suffix_stripped_and_display_name():
    task, problems = Task.from_config("unit_test_task", {"name": "Unit tests"})
    assert problems == []
    assert task.name() == "unit_test"
    assert task.display_name() == "Unit tests"


def test_display_name_defaults_to_name():
    task, _ = Task.from_config("lint_task", None)
    assert task.display_name() == "lint"
    assert task.is_start_node


def test_generic_task_prefers_alias():
    task, _ = Task.from_config("task", {"alias": "success", "depends_on": ["build"]})
    assert task.name() == "success"
    assert not task.is_start_node


def test_generic_task_without_alias():
    task, _ = Task.from_config("task", {})
    assert task.name() == "task"


def test_depends_on_string_is_single_entry():
    task, _ = Task.from_config("b_task", {"depends_on": "a"})
    assert task.depends_on == ("a",)


def test_non_mapping_body_rejected():
    with pytest.raises(InvalidConfigRootTypeError):
        Task.from_config("b_task", ["a"])


@pytest.mark.parametrize("raw", [5, {"a": 1}, 1.5])
def test_depends_on_must_be_list_or_string(raw):
    with pytest.raises(InvalidConfigRootTypeError, match="b_task"):
        Task.from_config("b_task", {"depends_on": raw})


def test_malformed_env_matrix_is_warning():
    """
    Verifica que uma env matrix fora do formato lista-de-mapeamentos é
    ignorada com um warning MALFORMED_MATRIX_SHAPE, sem abortar.

    Invariantes:
        - A task é construída normalmente
        - `env_matrix_labels()` é vazio
        - O ambiente da task (sem `matrix`) é preservado
    """
    task, problems = Task.from_config("b_task", {"env": {"FOO": "1", "matrix": "oops"}})
    assert [p.type for p in problems] == [MALFORMED_MATRIX_SHAPE]
    assert problems[0].details["section"] == "env.matrix"
    assert task.env_matrix is None
    assert task.env_matrix_labels() == []
    assert task.env == {"FOO": "1"}


def test_malformed_variant_matrix_is_warning():
    task, problems = Task.from_config("b_task", {"matrix": {"name": "x"}})
    assert [p.details["section"] for p in problems] == ["matrix"]
    assert task.subtask_labels() == []


def test_env_matrix_parse_variants():
    assert EnvMatrix.parse(None, task="t") == (None, None)
    matrix, problem = EnvMatrix.parse([{"A": 1}], task="t")
    assert problem is None and matrix.tuples == ({"A": 1},)


def test_subtask_labels_use_layered_env():
    task, _ = Task.from_config(
        "build_task",
        {
            "name": "Build $DISTRO",
            "env": {"DISTRO": "fedora"},
            "matrix": [{}, {"env": {"DISTRO": "debian"}}, {"name": "custom ${ARCH}"}],
        },
    )
    assert task.subtask_labels({"ARCH": "arm64"}) == [
        "Build fedora\\l",
        "Build debian\\l",
        "custom arm64\\l",
    ]


def test_env_matrix_labels():
    task, _ = Task.from_config(
        "t_task", {"env": {"matrix": [{"B": "2", "A": "x"}, {"B": "3", "A": "y"}]}}
    )
    assert task.env_matrix_labels() == ["A: x, y\\l", "B: 2, 3\\l"]
