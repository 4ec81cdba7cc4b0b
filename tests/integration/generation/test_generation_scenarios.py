"""Integration tests: full generation runs against an in-memory GitHub."""

import pytest

from boardkit.board import BoardColumn, BoardConfiguration, BoardType
from boardkit.generation import BoardGenerator, LabelReconciler
from boardkit.templates import GitHubLabel, Issue, Phase, Template, TemplateCatalog


@pytest.fixture
def template() -> Template:
    return Template(
        id="scenario",
        name="Scenario",
        labels=(GitHubLabel("bug", "FF0000"), GitHubLabel("feature", "00FF00")),
        phases=(Phase("P1", issues=(Issue("A"), Issue("B"))),),
    )


@pytest.fixture
def generator(github, no_throttle) -> BoardGenerator:
    return BoardGenerator(github, github, throttle=no_throttle)


def _columns(*names: str) -> tuple[BoardColumn, ...]:
    return tuple(BoardColumn(name) for name in names)


@pytest.mark.integration
class TestScenarios:
    """End-to-end runs with known outcomes."""

    def test_issues_only_run(self, generator: BoardGenerator, github, template: Template) -> None:
        github.add_issue("A")

        result = generator.generate(
            "octo", "app", template, BoardConfiguration(enabled=False)
        )

        assert result.labels_created == 2
        assert result.labels_updated == 0
        assert result.issues_created == 1
        assert result.issues_skipped == 1
        assert result.project_url is None
        assert [i.title for i in github.issues] == ["A", "B"]
        assert result.to_summary() == {
            "issuesCreated": 1,
            "labelsCreated": 2,
            "labelsUpdated": 0,
            "issuesSkipped": 1,
        }

    def test_board_run_places_new_issue_in_first_column(
        self, generator: BoardGenerator, github, template: Template
    ) -> None:
        github.add_issue("A")
        config = BoardConfiguration(enabled=True, columns=_columns("Todo", "Doing", "Done"))

        result = generator.generate("octo", "app", template, config)

        assert result.project_url == "https://github.com/users/octo/projects/1"
        issue_b = next(i for i in github.issues if i.title == "B")
        todo = result.placement_results[0]
        assert todo.issue_number == issue_b.number
        status = github.fields[next(iter(github.projects))][0]
        todo_option = next(o for o in status.options if o.name == "Todo")
        assert github.option_of_issue(issue_b.number) == todo_option.option_id
        assert github.option_of_issue(1) is None

    def test_fallback_field_board(self, github_without_status, no_throttle, template) -> None:
        generator = BoardGenerator(github_without_status, github_without_status, no_throttle)
        config = BoardConfiguration(enabled=True, columns=_columns("Todo", "Done"))

        result = generator.generate("octo", "app", template, config)

        project_id = next(iter(github_without_status.projects))
        (workflow,) = github_without_status.fields[project_id]
        assert workflow.name == "Workflow"
        assert [o.name for o in workflow.options] == ["Todo", "Done"]
        assert result.issues_created == 2
        assert {github_without_status.option_of_issue(n) for n in (1, 2)} == {
            workflow.options[0].option_id
        }


@pytest.mark.integration
class TestProperties:
    """Behavior that must hold for any run."""

    def test_label_reconcile_is_idempotent(self, github, template: Template) -> None:
        reconciler = LabelReconciler(github, "octo", "app")
        reconciler.reconcile({}, template.labels)

        snapshot = {label.name: label for label in github.list_labels("octo", "app")}
        second = reconciler.reconcile(snapshot, template.labels)

        assert [r.outcome.value for r in second] == ["unchanged", "unchanged"]

    def test_second_run_creates_nothing(
        self, generator: BoardGenerator, github, template: Template
    ) -> None:
        generator.generate("octo", "app", template)
        calls_before = len(github.calls_to("create_issue"))

        result = generator.generate("octo", "app", template)

        assert result.issues_created == 0
        assert result.labels_created == 0
        assert result.labels_unchanged == 2
        assert len(github.calls_to("create_issue")) == calls_before

    def test_label_failure_does_not_stop_run(self, generator: BoardGenerator, github) -> None:
        labels = tuple(GitHubLabel(f"l{i}", "ededed") for i in range(1, 6))
        template = Template(
            id="t", name="T", labels=labels, phases=(Phase("P", issues=(Issue("X"),)),)
        )
        github.fail_labels.add("l2")

        result = generator.generate("octo", "app", template)

        assert [c[1] for c in github.calls_to("create_label")] == ["l1", "l2", "l3", "l4", "l5"]
        assert result.labels_created == 4
        assert result.labels_failed == 1
        assert result.issues_created == 1

    def test_create_order_ignores_skips(self, generator: BoardGenerator, github) -> None:
        template = Template(
            id="t",
            name="T",
            phases=(
                Phase("One", issues=(Issue("a"), Issue("b"), Issue("c"))),
                Phase("Two", issues=(Issue("d"), Issue("e"))),
            ),
        )
        github.add_issue("b")
        github.add_issue("d")

        generator.generate("octo", "app", template)

        assert [c[1] for c in github.calls_to("create_issue")] == ["a", "c", "e"]

    def test_enabled_board_without_columns_creates_no_project(
        self, generator: BoardGenerator, github, template: Template
    ) -> None:
        config = BoardConfiguration(enabled=True, board_type=BoardType.CUSTOM, columns=())

        result = generator.generate("octo", "app", template, config)

        assert github.calls_to("create_project") == []
        assert result.project_url is None
        assert result.board_error is None


@pytest.mark.integration
class TestBundledTemplates:
    """Bundled templates generate cleanly."""

    @pytest.mark.parametrize(
        "template_id",
        [
            "api-development",
            "bug-tracking",
            "military-rideshare",
            "mobile-app-launch",
            "saas-mvp",
        ],
    )
    def test_generate_with_kanban_board(
        self, generator: BoardGenerator, github, template_id: str
    ) -> None:
        template = TemplateCatalog.load().get(template_id)
        config = BoardConfiguration(
            enabled=True,
            board_type=BoardType.KANBAN,
            columns=_columns("Todo", "In Progress", "Done"),
        )

        result = generator.generate("octo", "app", template, config)

        assert result.issues_created == template.issue_count
        assert result.labels_created == len(template.labels)
        assert result.failures == []
        assert len(result.placement_results) == template.issue_count
