"""
Inference engine for the guessing game: candidate filtering, next trait selection and the guess/ask decision

Answers use the same three-valued convention as the rest of the project:
True / False are definite answers, None is "unknown" and never constrains the candidates.

The engine holds no lock. Callers must not interleave calls into one engine.
"""

from dataclasses import dataclass
from typing import Optional
import logging

logger = logging.getLogger(__name__)

MAX_STEPS = 10


class NoPendingTrait(RuntimeError):
    """Raised when an answer is recorded but every trait is already answered"""


@dataclass(frozen=True)
class Ask:
    trait: str


@dataclass(frozen=True)
class Guess:
    #None means the budget ran out with no candidate left
    entity: Optional[str]


@dataclass(frozen=True)
class NoMatch:
    pass


class InferenceEngine:
    """
    A class used to run one game over one category of the knowledge base

    Attributes
    ----------
    kb : KnowledgeBase
        the knowledge base the category is read from
    category : str
        the active category
    max_steps : int
        the step budget after which a guess is forced
    answers : dict
        trait -> True/False/None, insertion order is the order asked
    step_count : int
        number of answers recorded so far

    Methods
    -------
    reset()
        clears the answers and the step count
    candidates()
        entity names consistent with every definite answer
    next_trait()
        first unanswered trait in declared order, or None
    record_answer(value)
        answers the pending trait
    decide()
        Ask, Guess or NoMatch for the current state
    """

    def __init__(self, kb, category, max_steps=MAX_STEPS):
        """
        Parameters
        ----------
        kb : KnowledgeBase
            the knowledge base
        category : str
            the category to play, raises UnknownCategory if not registered
        max_steps : int, default 10
            the step budget
        """

        if isinstance(max_steps, bool) or not isinstance(max_steps, int) or max_steps < 1:
            raise ValueError(f"max_steps must be a positive integer, got {max_steps!r}")

        self.kb = kb
        self.category = category
        self.max_steps = max_steps

        #fail fast on unknown categories
        self.traits = kb.traitsOf(category)
        self.entities = kb.entitiesOf(category)

        self.answers = {}
        self.step_count = 0

    def reset(self):
        self.answers = {}
        self.step_count = 0
        logger.debug(f"Engine reset for {self.category}")

    def candidates(self):
        """
        Returns the names of every entity consistent with all definite answers,
        in the category's declaration order
        """

        definite = [(trait, value) for trait, value in self.answers.items() if value is not None]

        return [name for name, entity in self.entities.items()
                if all(entity.value(trait) == value for trait, value in definite)]

    def next_trait(self):
        """
        Returns the first trait in declared order with no recorded answer, or None
        """

        for trait in self.traits:
            if trait not in self.answers:
                return trait
        return None

    def answer_trait(self, trait, value):
        """
        Sets the answer for a trait, overwriting any earlier answer, and counts the step
        """

        if value is not None and not isinstance(value, bool):
            raise TypeError(f"Answer must be True, False or None, got {value!r}")

        #re-insert so the dict order stays the order traits were answered
        self.answers.pop(trait, None)
        self.answers[trait] = value
        self.step_count += 1

        logger.debug(f"Step {self.step_count}: {trait} = {value}")

    def record_answer(self, value):
        """
        Answers the pending trait i.e. whatever next_trait() returns
        """

        trait = self.next_trait()
        if trait is None:
            raise NoPendingTrait(f"Every trait of {self.category} has been answered")

        self.answer_trait(trait, value)
        return trait

    def progress(self):
        return min(self.step_count, self.max_steps)

    def decide(self):
        """
        Decides whether to ask another trait or guess

        Returns:
            Guess if one candidate is left or the step budget is spent,
            NoMatch if no candidate is left, otherwise Ask for the next trait
        """

        remaining = self.candidates()

        if len(remaining) == 1 or self.step_count >= self.max_steps:
            decision = Guess(remaining[0] if remaining else None)

        elif not remaining:
            decision = NoMatch()

        else:
            trait = self.next_trait()

            #traits exhausted with several candidates left
            if trait is None:
                decision = Guess(remaining[0])
            else:
                decision = Ask(trait)

        logger.debug(f"{len(remaining)} candidate(s) after {self.step_count} step(s): {decision}")
        return decision
