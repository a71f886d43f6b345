"""
Command line interface for the guessing game, can also phrase guesses with an LLM

Usage:
    python UI.py                          # cartoon characters, template guesses
    python UI.py --category animal        # another built-in category
    python UI.py --model llama --base-url http://gpu07:8000/v1
    python UI.py --kb my_categories.json  # categories from a JSON file
"""

import sys
import argparse
import asyncio
import logging

from KB_Construction import KnowledgeBase, UnknownCategory, MalformedKnowledgeBase
from categories import default_kb
from guess_renderer import TemplateGuessRenderer, LLMGuessRenderer, MODELS, DEFAULT_BASE_URL
from inference_engine import MAX_STEPS
from session import GameSession, GameListener, InvalidAnswerValue, State

logger = logging.getLogger("Guesser_CLI_Tool")
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

ANSWERS = {
    'y': 'yes', 'yes': 'yes',
    'n': 'no', 'no': 'no',
    'u': 'unknown', 'unknown': 'unknown', '?': 'unknown', 'idk': 'unknown',
}

YES_NO = {'y': True, 'yes': True, 'n': False, 'no': False}


class CLI(GameListener):
    """
    Plays the session in a terminal: prints what the session emits and reads the player's answers
    """

    def __init__(self, session=None, input_fn=None, output_fn=None):
        self.session = session
        self.input = input_fn or input
        self.output = output_fn or print

    # --- outbound hooks ---

    def on_ask_question(self, text):
        self.output(f"[QUESTION] {text}")

    def on_guess(self, text):
        self.output(f"[GUESS] {text}")

    def on_no_match(self, text):
        self.output(f"[RESULT] {text}")

    def on_progress(self, step_count, max_steps):
        self.output(f"Step {step_count}/{max_steps}")

    def on_status(self, text):
        self.output(text)

    def on_result(self, text):
        self.output(f"[RESULT] {text}")

    # --- input ---

    def ask(self, prompt, choices, hint="y/n"):
        """Asks until the answer is one of choices, returns the normalised answer"""
        while True:
            answer = self.input(prompt).strip().lower()
            if answer in choices:
                return choices[answer]
            self.output(f"Invalid answer, please answer {hint}")

    async def play_round(self):
        """Plays one game, returns when the game reaches a terminal state"""

        await self.session.start()

        while self.session.state is State.ASKING:
            answer = self.ask("Answer (y/n/u): ", ANSWERS, hint="y/n/u")
            try:
                await self.session.answer(answer)
            except InvalidAnswerValue as e:
                self.output(str(e))

        if self.session.state is State.AWAITING_FEEDBACK:
            correct = self.ask("Was I right? (y/n): ", YES_NO)
            self.session.report_outcome(correct)

    async def run(self):
        await self.session.load()

        while True:
            await self.play_round()

            again = self.ask("Play again? (y/n): ", YES_NO)
            if not again:
                break
            self.session.request_reset()


def build_session(args, listener):
    """Builds the knowledge base, renderer and session from the command line arguments"""

    kb = KnowledgeBase.fromJSON(args.kb) if args.kb else default_kb()

    if args.no_llm:
        renderer = TemplateGuessRenderer()
    else:
        renderer = LLMGuessRenderer(model=args.model, base_url=args.base_url, timeout=args.timeout)

    return GameSession(kb, args.category, renderer=renderer, listener=listener, max_steps=args.max_steps)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Think of a character, I will guess it")
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--category', type=str, default='cartoon_character', help='Category to play')
    parser.add_argument('--kb', type=str, default=None, help='Path to a JSON knowledge base')
    parser.add_argument('--max-steps', type=int, default=MAX_STEPS, help='Questions before a guess is forced')
    parser.add_argument('--model', type=str, default='distilgpt2', choices=MODELS.keys(), help='Model preset used to phrase the guess')
    parser.add_argument('--base-url', type=str, default=DEFAULT_BASE_URL, help='OpenAI compatible server')
    parser.add_argument('--timeout', type=float, default=None, help='Seconds to wait for the model')
    parser.add_argument('--no-llm', action='store_true', help='Use the plain guess template')
    return parser.parse_args(argv)


def main(argv=None):
    """Main function"""

    args = parse_args(argv)

    #switch to DEBUG when asked
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        print("--- DEBUG MODE ENABLED ---")

    cli = CLI()

    try:
        cli.session = build_session(args, cli)
    except (UnknownCategory, MalformedKnowledgeBase, ValueError, OSError) as e:
        print(f"\nConfiguration error: {e}")
        sys.exit(2)

    try:
        asyncio.run(cli.run())
    except (KeyboardInterrupt, EOFError):
        print("\n\nProgram interrupted by user. Goodbye!")
        sys.exit(0)
    except Exception as e:
        print(f"\nUnexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
