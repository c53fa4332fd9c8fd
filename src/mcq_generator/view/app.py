from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from textual.app import App, ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widget import Widget
from textual.widgets import (
    Button,
    Footer,
    Input,
    Label,
    Select,
    Static,
    Switch,
)

from mcq_generator.export.pdf import ExportError, export_quiz
from mcq_generator.generation.client import GenerationClient
from mcq_generator.generation.errors import ConfigurationError
from mcq_generator.generation.models import (
    Difficulty,
    GenerationRequest,
    Question,
    RequestValidationError,
)
from mcq_generator.quiz.runner import run_generation
from mcq_generator.quiz.state import QuizController, QuizState, Score

from .form import FormState

logger = logging.getLogger("mcq_generator.view")

ClientFactory = Callable[[], GenerationClient]


# Pure helpers for option rendering (testable without running the App)
def option_label(
    question: Question, key: str, *, selected: Optional[str], practice: bool
) -> str:
    text = f"{key}) {question.options[key]}"
    reveal = not practice or selected is not None
    if reveal and key == question.correct_key:
        return f"✔ {text}"
    return text


def option_classes(
    question: Question, key: str, *, selected: Optional[str], practice: bool
) -> List[str]:
    correct = key == question.correct_key
    if not practice:
        return ["correct-answer"] if correct else []
    if selected is None:
        return []
    if correct:
        return ["practice-correct"]
    if key == selected:
        return ["practice-incorrect"]
    return []


def score_text(score: Score) -> str:
    return f"Score: {score}"


class QuestionView(Widget):
    """One MCQ with a button per option."""

    DEFAULT_CSS = """
    QuestionView { height: auto; margin: 0 0 1 0; }
    QuestionView .stem { text-style: bold; }
    QuestionView Button { width: 100%; }
    """

    def __init__(
        self,
        index: int,
        question: Question,
        *,
        selected: Optional[str],
        practice: bool,
    ) -> None:
        super().__init__()
        self.index = index
        self.question = question
        self.selected = selected
        self.practice = practice

    def compose(self) -> ComposeResult:
        yield Static(
            f"{self.index + 1}. {self.question.prompt}", classes="stem"
        )
        for key in self.question.options:
            yield Button(
                option_label(
                    self.question,
                    key,
                    selected=self.selected,
                    practice=self.practice,
                ),
                name=f"{self.index}:{key}",
                classes=" ".join(
                    ["option"]
                    + option_classes(
                        self.question,
                        key,
                        selected=self.selected,
                        practice=self.practice,
                    )
                ),
            )


class QuizApp(App):
    TITLE = "MCQ Generator"
    CSS = """
#form { height: auto; }
#topic { width: 2fr; }
#count { width: 12; }
#difficulty { width: 16; }
#controls { height: auto; }
#error { color: $error; }
#status, #score { color: $text-muted; }
.correct-answer, .practice-correct { background: $success; }
.practice-incorrect { background: $error; }
"""
    BINDINGS = [
        ("ctrl+g", "generate", "Generate"),
        ("ctrl+t", "toggle_practice", "Practice mode"),
        ("ctrl+e", "export", "Download PDF"),
    ]

    def __init__(
        self,
        client_factory: ClientFactory,
        *,
        controller: Optional[QuizController] = None,
        export_dir: Path,
    ) -> None:
        super().__init__()
        self.form = FormState()
        self.controller = controller or QuizController()
        self.export_dir = export_dir
        self._client_factory = client_factory
        self._quiz_topic = ""
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="form"):
            yield Input(placeholder="Enter topic", id="topic")
            yield Select(
                [(level.value, level) for level in Difficulty],
                value=self.form.difficulty,
                allow_blank=False,
                id="difficulty",
            )
            yield Input(value=str(self.form.count), type="integer", id="count")
            yield Button("Generate", id="generate", variant="primary")
        yield Static("", id="status")
        yield Static("", id="error")
        with Horizontal(id="controls"):
            yield Label("Practice Mode")
            yield Switch(
                value=self.controller.state.practice_mode, id="practice"
            )
            yield Button("Download PDF", id="export")
        yield Static("", id="score")
        yield VerticalScroll(id="questions")
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.controller.subscribe(self._render_state)
        self._render_state(self.controller.state)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()

    # ------------- Input handling -------------

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "topic":
            self.form.topic = event.value
        elif event.input.id == "count":
            self.form.set_count(event.value)
        self._render_state(self.controller.state)

    def on_select_changed(self, event: Select.Changed) -> None:
        if isinstance(event.value, Difficulty):
            self.form.difficulty = event.value

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if event.value != self.controller.state.practice_mode:
            self.controller.toggle_practice_mode()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button = event.button
        if button.id == "generate":
            self.action_generate()
        elif button.id == "export":
            self.action_export()
        elif button.name and ":" in button.name:
            index, key = button.name.split(":", 1)
            self.controller.record_answer(int(index), key)

    # ------------- Actions -------------

    def action_generate(self) -> None:
        try:
            request = self.form.to_request()
        except RequestValidationError as exc:
            self.controller.fail(str(exc))
            return
        self.run_worker(
            self._generate(request), exclusive=True, group="generation"
        )

    async def _generate(self, request: GenerationRequest) -> None:
        self._quiz_topic = request.topic
        try:
            client = self._client_factory()
        except ConfigurationError as exc:
            self.controller.begin_generation()
            self.controller.fail(str(exc))
            return
        await run_generation(self.controller, client, request)

    def action_toggle_practice(self) -> None:
        self.controller.toggle_practice_mode()

    def action_export(self) -> None:
        state = self.controller.state
        try:
            path = export_quiz(
                self._quiz_topic,
                state.questions,
                state.answers,
                state.practice_mode,
                out_dir=self.export_dir,
            )
        except ExportError as exc:
            logger.error("Export failed: %s", exc)
            self.controller.fail(str(exc))
            return
        if path is not None:
            self.notify(f"Saved {path}")

    # ------------- Rendering -------------

    def _render_state(self, state: QuizState) -> None:
        self.query_one("#status", Static).update(
            "Generating... Please wait." if state.loading else ""
        )
        self.query_one("#error", Static).update(
            self.form.count_warning() or state.error or ""
        )
        generate = self.query_one("#generate", Button)
        generate.disabled = state.loading or not self.form.can_submit()
        generate.label = "Generating..." if state.loading else "Generate"

        practice = self.query_one("#practice", Switch)
        if practice.value != state.practice_mode:
            practice.value = state.practice_mode
        self.query_one("#export", Button).disabled = not state.questions

        score = self.controller.score()
        self.query_one("#score", Static).update(
            score_text(score)
            if state.practice_mode and state.questions
            else ""
        )

        container = self.query_one("#questions", VerticalScroll)
        container.remove_children()
        container.mount_all(
            QuestionView(
                index,
                question,
                selected=state.answer_for(index),
                practice=state.practice_mode,
            )
            for index, question in enumerate(state.questions)
        )
