"""
Session orchestration: drives the question -> answer -> guess cycle between a UI and the inference engine

Idle/AwaitingStart --start()--> Asking --answer()--> Asking | Guessing | NoMatch
Guessing --render--> AwaitingFeedback --report_outcome()--> Idle
any state --request_reset()--> Idle

Single caller only: each call must complete before the next is made. While GUESSING the render
is awaited and answer() is refused, the UI should keep its inputs disabled until on_guess().
"""

from enum import Enum
import logging

from inference_engine import InferenceEngine, Ask, Guess, NoMatch, MAX_STEPS
from guess_renderer import TemplateGuessRenderer

logger = logging.getLogger(__name__)

QUESTION_FALLBACK = 'Does your character have the trait "{trait}"?'

START_TEXT = 'Type "start" to begin.'
THINKING_TEXT = "Thinking…"
NO_MATCH_TEXT = "I'm stumped! I don't know this character."
CORRECT_TEXT = "Amazing! I guessed it!"
WRONG_TEXT = "You win! I couldn't guess it."


class InvalidAnswerValue(ValueError):
    """The UI passed something other than yes / no / unknown"""


class InvalidTransition(RuntimeError):
    """The requested action is not allowed in the current state"""


class State(Enum):
    IDLE = "idle"
    AWAITING_START = "awaiting_start"
    ASKING = "asking"
    GUESSING = "guessing"
    AWAITING_FEEDBACK = "awaiting_feedback"
    NO_MATCH = "no_match"


class Answer(Enum):
    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"

    @property
    def truth(self):
        return {"yes": True, "no": False, "unknown": None}[self.value]

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidAnswerValue(f"Answer must be one of yes/no/unknown, got {value!r}")


class GameListener:
    """
    Outbound contract of the session, every hook is a no-op by default
    """

    def on_ask_question(self, text):
        pass

    def on_guess(self, text):
        pass

    def on_no_match(self, text):
        pass

    def on_progress(self, step_count, max_steps):
        pass

    def on_status(self, text):
        pass

    def on_result(self, text):
        pass


class GameSession:
    """
    A class used to run games for one category and report to a listener

    Attributes
    ----------
    engine : InferenceEngine
        the engine holding answers and step count
    renderer : TemplateGuessRenderer
        turns the guessed entity into display text
    fallback_renderer : TemplateGuessRenderer
        gives the guess text when the renderer raises
    listener : GameListener
        receives questions, guesses and results
    state : State
        current state of the session
    pending_trait : str
        the trait the last question asked about
    last_guess : str or None
        entity of the last guess, None for the unknown entity placeholder

    Methods
    -------
    load()
        readies the renderer and waits for start
    start()
        begins a new game
    answer(value)
        answers the pending question
    report_outcome(correct)
        ends the game after a guess
    request_reset()
        abandons whatever is going on
    """

    def __init__(self, kb, category, renderer=None, listener=None, max_steps=MAX_STEPS,
                 question_fallback=QUESTION_FALLBACK, questions=None):
        """
        Parameters
        ----------
        kb : KnowledgeBase
            the knowledge base
        category : str
            category to play
        renderer : TemplateGuessRenderer, optional
            defaults to the plain template renderer
        listener : GameListener, optional
            defaults to a listener that ignores everything
        max_steps : int, default 10
            step budget of the engine
        question_fallback : str
            format string with a {trait} field for traits without a question
        questions : dict, optional
            trait -> question overrides on top of the category's own questions
        """

        self.engine = InferenceEngine(kb, category, max_steps)
        self.renderer = renderer or TemplateGuessRenderer()
        #keeps a custom template when the renderer has one
        if isinstance(self.renderer, TemplateGuessRenderer):
            self.fallback_renderer = self.renderer
        else:
            self.fallback_renderer = TemplateGuessRenderer()
        self.listener = listener or GameListener()

        self.questions = dict(kb.questionsOf(category))
        self.questions.update(questions or {})
        self.question_fallback = question_fallback

        self.state = State.IDLE
        self.pending_trait = None
        self.last_guess = None

    def question_for(self, trait):
        if trait in self.questions:
            return self.questions[trait]
        return self.question_fallback.format(trait=trait)

    def _require(self, *states):
        if self.state not in states:
            allowed = ", ".join(s.name for s in states)
            raise InvalidTransition(f"Not allowed in state {self.state.name} (needs {allowed})")

    def _emit_progress(self):
        self.listener.on_progress(self.engine.progress(), self.engine.max_steps)

    async def load(self):
        """Loads the renderer then waits for start(), a failed load still allows template guesses"""

        self._require(State.IDLE, State.AWAITING_START)

        self.listener.on_status("Loading model…")
        await self.renderer.load()

        self.state = State.AWAITING_START
        self.listener.on_status(START_TEXT)

    async def start(self):
        self._require(State.IDLE, State.AWAITING_START)

        self.engine.reset()
        self.last_guess = None
        self._emit_progress()

        logger.debug(f"New game in {self.engine.category}")
        await self._advance(self.engine.decide())

    async def answer(self, value):
        """
        Parameters
        ----------
        value : str or Answer
            yes, no or unknown
        """

        answer = Answer.parse(value)
        self._require(State.ASKING)

        trait = self.engine.record_answer(answer.truth)
        logger.debug(f"{trait} answered {answer.value}")

        self._emit_progress()
        await self._advance(self.engine.decide())

    async def _advance(self, decision):
        if isinstance(decision, Ask):
            self.pending_trait = decision.trait
            self.state = State.ASKING
            self.listener.on_ask_question(self.question_for(decision.trait))

        elif isinstance(decision, Guess):
            self.pending_trait = None
            await self._guess(decision.entity)

        elif isinstance(decision, NoMatch):
            self.pending_trait = None
            self.state = State.NO_MATCH
            logger.info("No candidate matches the answers")
            self.listener.on_no_match(NO_MATCH_TEXT)

    async def _guess(self, entity):
        self.state = State.GUESSING
        self.last_guess = entity
        self.listener.on_status(THINKING_TEXT)

        try:
            text = await self.renderer.render_guess(entity)
        except Exception as e:
            logger.warning(f"Rendering the guess failed, using the template: {e}")
            text = self.fallback_renderer.fallback(entity)

        #a reset during the render wins
        if self.state is not State.GUESSING:
            return

        self.state = State.AWAITING_FEEDBACK
        logger.info(f"Guessing {entity!r} after {self.engine.step_count} step(s)")
        self.listener.on_guess(text)

    def report_outcome(self, correct):
        self._require(State.AWAITING_FEEDBACK)

        self.state = State.IDLE
        logger.info(f"Guess {self.last_guess!r} was {'right' if correct else 'wrong'}")
        self.listener.on_result(CORRECT_TEXT if correct else WRONG_TEXT)

    def request_reset(self):
        self.engine.reset()
        self.pending_trait = None
        self.last_guess = None
        self.state = State.IDLE

        self._emit_progress()
        self.listener.on_status(START_TEXT)
