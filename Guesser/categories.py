"""
Built-in categories for the guessing game

- cartoon_character: the original five characters
- animal: a larger category, enough traits to exhaust the step budget
"""

from KB_Construction import Category, KnowledgeBase

import logging

logger = logging.getLogger(__name__)

#trait id --> question shown to the user
cartoon_questions = {
    "is_animal": "Is your character an animal?",
    "is_blue": "Is your character primarily blue?",
    "can_fly": "Can your character fly?",
    "wears_pants": "Does your character wear pants?",
    "is_disney": "Is your character from Disney?",
}

animal_questions = {
    "is_mammal": "Is your animal a mammal?",
    "lives_in_water": "Does your animal live in water?",
    "can_fly": "Can your animal fly?",
    "has_fur": "Does your animal have fur?",
    "is_domestic": "Is your animal commonly kept as a pet or on a farm?",
    "is_carnivore": "Does your animal mostly eat meat?",
    "has_stripes": "Does your animal have stripes?",
    "is_large": "Is your animal bigger than a human?",
    "lays_eggs": "Does your animal lay eggs?",
    "has_tail": "Does your animal have a tail?",
    "is_nocturnal": "Is your animal mostly active at night?",
    "lives_in_africa": "Is your animal found in the wild in Africa?",
}


def cartoon_character():
    """
    The cartoon character category

    Returns:
        Category
    """

    traits = ["is_animal", "is_blue", "can_fly", "wears_pants", "is_disney"]

    characters = {
        "Daffy Duck": {
            "is_animal": True,
            "is_blue": False,
            "can_fly": True,
            "wears_pants": False,
            "is_disney": False,
        },
        "Stitch": {
            "is_animal": True,
            "is_blue": True,
            "can_fly": False,
            "wears_pants": False,
            "is_disney": True,
        },
        "Donald Duck": {
            "is_animal": True,
            "is_blue": False,
            "can_fly": False,
            "wears_pants": False,
            "is_disney": True,
        },
        "Sonic": {
            "is_animal": True,
            "is_blue": True,
            "can_fly": False,
            "wears_pants": True,
            "is_disney": False,
        },
        "Genie": {
            "is_animal": False,
            "is_blue": True,
            "can_fly": True,
            "wears_pants": True,
            "is_disney": True,
        },
    }

    return Category("cartoon_character", traits, characters, cartoon_questions)


def _animal(is_mammal, lives_in_water, can_fly, has_fur, is_domestic, is_carnivore,
            has_stripes, is_large, lays_eggs, has_tail, is_nocturnal, lives_in_africa):
    return {
        "is_mammal": is_mammal,
        "lives_in_water": lives_in_water,
        "can_fly": can_fly,
        "has_fur": has_fur,
        "is_domestic": is_domestic,
        "is_carnivore": is_carnivore,
        "has_stripes": has_stripes,
        "is_large": is_large,
        "lays_eggs": lays_eggs,
        "has_tail": has_tail,
        "is_nocturnal": is_nocturnal,
        "lives_in_africa": lives_in_africa,
    }


def animal():
    """
    The animal category, twelve traits

    Returns:
        Category
    """

    traits = list(animal_questions)

    animals = {
        #            mammal water  fly    fur    domest carniv stripe large  eggs   tail   night  africa
        "Dog":     _animal(True,  False, False, True,  True,  True,  False, False, False, True,  False, False),
        "Cat":     _animal(True,  False, False, True,  True,  True,  False, False, False, True,  True,  False),
        "Tiger":   _animal(True,  False, False, True,  False, True,  True,  True,  False, True,  True,  False),
        "Zebra":   _animal(True,  False, False, True,  False, False, True,  True,  False, True,  False, True),
        "Cow":     _animal(True,  False, False, True,  True,  False, False, True,  False, True,  False, False),
        "Dolphin": _animal(True,  True,  False, False, False, True,  False, True,  False, True,  False, False),
        "Eagle":   _animal(False, False, True,  False, False, True,  False, False, True,  True,  False, True),
        "Owl":     _animal(False, False, True,  False, False, True,  False, False, True,  True,  True,  False),
        "Chicken": _animal(False, False, False, False, True,  False, False, False, True,  True,  False, False),
        "Goldfish": _animal(False, True, False, False, True,  False, False, False, True,  True,  False, False),
        "Shark":   _animal(False, True,  False, False, False, True,  False, True,  True,  True,  False, False),
        "Frog":    _animal(False, True,  False, False, False, True,  False, False, True,  False, True,  False),
    }

    return Category("animal", traits, animals, animal_questions)


def default_kb():
    """Knowledge base holding every built-in category"""

    kb = KnowledgeBase([cartoon_character(), animal()])
    logger.debug(f"Built-in categories: {kb.categories()}")
    return kb
