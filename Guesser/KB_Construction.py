"""
Creates the classes used to hold the guessing game knowledge base: categories of entities described by boolean traits

Status: Done
        - Category validation - DONE
        - JSON loading - DONE
"""

from collections.abc import Mapping
from types import MappingProxyType
import json
import logging

logger = logging.getLogger(__name__)


class UnknownCategory(KeyError):
    """Raised when a category is looked up that was never registered"""


class MalformedKnowledgeBase(ValueError):
    """Raised at registration time when category data is inconsistent"""


class Entity:
    """
    A guessable item with a value for every trait of its category

    Attributes
    ----------
    name : str
        the name of the entity, unique within its category
    traits : mapping
        read-only mapping of trait identifier to bool
    """

    def __init__(self, name, traits):
        self.name = name
        self.traits = MappingProxyType(dict(traits))

    def value(self, trait):
        return self.traits[trait]

    def __repr__(self):
        return f"Entity({self.name!r})"


class Category:
    """
    A class used to represent a single category of the knowledge base

    Attributes
    ----------
    name : str
        the category identifier
    traits : tuple
        the trait identifiers in the order they are asked
    entities : mapping
        read-only mapping of entity name to Entity, in declaration order
    questions : mapping
        read-only mapping of trait identifier to question text, may be partial

    Methods
    -------
    validate()
        checks the trait list and every entity, raising MalformedKnowledgeBase
    """

    def __init__(self, name, traits, entities, questions=None):
        """
        Parameters
        ----------
        name : str
            the category identifier
        traits : list
            ordered trait identifiers
        entities : dict
            entity name -> {trait: bool}
        questions : dict, optional
            trait identifier -> human readable question
        """

        self.name = name

        #a bare string would be split into single letter traits
        if not isinstance(traits, (list, tuple)):
            raise MalformedKnowledgeBase(f"Category '{name}' traits must be a list, got {type(traits).__name__}")
        if not isinstance(entities, Mapping):
            raise MalformedKnowledgeBase(f"Category '{name}' entities must be a mapping, got {type(entities).__name__}")
        if questions is not None and not isinstance(questions, Mapping):
            raise MalformedKnowledgeBase(f"Category '{name}' questions must be a mapping, got {type(questions).__name__}")

        self.traits = tuple(traits)

        self._validate_traits()

        built = {}
        for entity_name, values in entities.items():
            self._validate_entity(entity_name, values)
            built[entity_name] = Entity(entity_name, values)
        self.entities = MappingProxyType(built)

        questions = dict(questions or {})
        for trait in questions:
            if trait not in self.traits:
                raise MalformedKnowledgeBase(
                    f"Category '{name}' has a question for undeclared trait '{trait}'")
        self.questions = MappingProxyType(questions)

    def _validate_traits(self):
        seen = set()
        for trait in self.traits:
            if not isinstance(trait, str) or not trait:
                raise MalformedKnowledgeBase(f"Category '{self.name}' has an invalid trait id: {trait!r}")
            if trait in seen:
                raise MalformedKnowledgeBase(f"Category '{self.name}' declares trait '{trait}' twice")
            seen.add(trait)

    def _validate_entity(self, entity_name, values):
        if not isinstance(values, Mapping):
            raise MalformedKnowledgeBase(
                f"Entity '{entity_name}' in '{self.name}' must map traits to values, got {type(values).__name__}")

        missing = [t for t in self.traits if t not in values]
        if missing:
            raise MalformedKnowledgeBase(
                f"Entity '{entity_name}' in '{self.name}' is missing traits: {missing}")

        extra = [t for t in values if t not in self.traits]
        if extra:
            raise MalformedKnowledgeBase(
                f"Entity '{entity_name}' in '{self.name}' has undeclared traits: {extra}")

        for trait, value in values.items():
            #bool only, 0/1 are rejected
            if not isinstance(value, bool):
                raise MalformedKnowledgeBase(
                    f"Entity '{entity_name}' in '{self.name}' has a non-boolean value for '{trait}': {value!r}")

    def __repr__(self):
        return f"Category({self.name!r}, traits={len(self.traits)}, entities={len(self.entities)})"


class KnowledgeBase:
    """
    Static registry of categories, the only data source of the inference engine

    Methods
    -------
    addCategory(category)
        registers a category at configuration time
    categories()
        lists registered category identifiers
    traitsOf(category)
        ordered trait identifiers of a category
    entitiesOf(category)
        entity name -> Entity mapping of a category
    questionsOf(category)
        trait identifier -> question text mapping of a category
    fromDict(data) / fromJSON(path)
        builds a knowledge base from plain data
    """

    def __init__(self, categories=None):
        #dictionary of categories --> 'name': Category object
        self._categories = {}

        for category in categories or []:
            self.addCategory(category)

    def addCategory(self, category):
        if category.name in self._categories:
            raise MalformedKnowledgeBase(f"Category '{category.name}' is already registered")

        self._categories[category.name] = category
        logger.debug(f"Registered {category}")

    def categories(self):
        return list(self._categories)

    def category(self, name):
        try:
            return self._categories[name]
        except KeyError:
            raise UnknownCategory(name) from None

    def traitsOf(self, category):
        return self.category(category).traits

    def entitiesOf(self, category):
        return self.category(category).entities

    def questionsOf(self, category):
        return self.category(category).questions

    @classmethod
    def fromDict(cls, data):
        """
        Builds a knowledge base from a dictionary of the form

            {"<category>": {"traits": [...], "questions": {...}, "entities": {"<name>": {"<trait>": bool}}}}
        """

        kb = cls()
        for name, body in data.items():
            if not isinstance(body, dict) or 'traits' not in body or 'entities' not in body:
                raise MalformedKnowledgeBase(f"Category '{name}' needs 'traits' and 'entities'")

            kb.addCategory(Category(name, body['traits'], body['entities'], body.get('questions')))

        return kb

    @classmethod
    def fromJSON(cls, path):
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        logger.info(f"Loading knowledge base from {path}")
        return cls.fromDict(data)
