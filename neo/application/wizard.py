"""Guided strategy wizard: four questions, then every document at once."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from neo.core.scheduler import DeferredOperation, DeferredQueue
from neo.core.state import DocumentStateStore, Transcript
from neo.core.synthesis import COMPLETION_MESSAGE, create_strategy_documents
from neo.domain import WizardState


logger = logging.getLogger(__name__)

FINAL_STEP = 4

WELCOME_PROMPT = """Let's create your strategy step by step. We'll follow this process:

1. Goals & Vision (Current Step)
   - What are your main business goals for the next 1-3 years?
   - What's your vision for the company?
   - What impact do you want to make?

Please start by sharing your goals and vision."""

# Keyed by the step that was just answered.
STEP_PROMPTS: dict[int, str] = {
    1: """Thank you for sharing your goals and vision. Now, let's identify the key challenges you face:

2. Challenges (Current Step)
   - What are the main obstacles to achieving your goals?
   - What market challenges do you face?
   - What internal limitations need to be addressed?""",
    2: """Understanding the challenges helps us focus. Now, let's explore the opportunities:

3. Opportunities (Current Step)
   - What market opportunities can you capitalize on?
   - What unique advantages do you have?
   - What trends can you leverage?""",
    3: """Great insights on the opportunities. Finally, let's define your unique value proposition:

4. Value Proposition (Current Step)
   - What makes your solution unique?
   - Why should customers choose you over alternatives?
   - What specific benefits do you deliver?""",
    4: (
        "Thank you for all this valuable information. I'm now generating your strategy document "
        "that brings all these elements together coherently."
    ),
}


@dataclass(frozen=True)
class WizardReply:
    prompt: str
    state: WizardState
    completion: DeferredOperation | None = None


class GuidedWizard:
    def __init__(
        self,
        documents: DocumentStateStore,
        transcript: Transcript,
        queue: DeferredQueue,
        completion_delay: float,
    ) -> None:
        self._documents = documents
        self._transcript = transcript
        self._queue = queue
        self._delay = completion_delay
        self._state = WizardState()

    @property
    def state(self) -> WizardState:
        return WizardState(active=self._state.active, step=self._state.step, answers=dict(self._state.answers))

    @property
    def active(self) -> bool:
        return self._state.active

    def start(self) -> WizardReply:
        self._state = WizardState(active=True, step=1, answers={})
        self._transcript.add(WELCOME_PROMPT)
        logger.info("guided strategy started")
        return WizardReply(prompt=WELCOME_PROMPT, state=self.state)

    def submit(self, text: str) -> WizardReply | None:
        """Record the answer of the current step; ``None`` when the wizard is inactive."""

        if not self._state.active or not 1 <= self._state.step <= FINAL_STEP:
            return None

        step = self._state.step
        answers = dict(self._state.answers)
        answers[step] = text
        prompt = STEP_PROMPTS[step]
        self._transcript.add(prompt)

        completion: DeferredOperation | None = None
        if step == FINAL_STEP:
            self._state = WizardState()
            completion = self._queue.schedule(
                self._delay,
                lambda: self._complete(answers),
                label="wizard-completion",
            )
            logger.info("guided strategy answers collected, generating documents")
        else:
            self._state = WizardState(active=True, step=step + 1, answers=answers)
        return WizardReply(prompt=prompt, state=self.state, completion=completion)

    def cancel(self) -> None:
        self._state = WizardState()

    def _complete(self, answers: dict[int, str]) -> str:
        result = create_strategy_documents(answers)
        self._documents.replace_all(result.contents, result.counts)
        self._transcript.add(COMPLETION_MESSAGE)
        logger.info("guided strategy documents generated")
        return COMPLETION_MESSAGE
