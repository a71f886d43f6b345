import unittest
import json
import os
import tempfile
import logging

from KB_Construction import KnowledgeBase, Category, Entity, UnknownCategory, MalformedKnowledgeBase
from categories import cartoon_character, animal, default_kb

logging.basicConfig(level=logging.CRITICAL)


class TestCategory(unittest.TestCase):
    """Tests for category construction and registration time validation"""

    def test_category_basic(self):
        """Test traits keep their order and entities their declaration order"""
        cat = Category("c", ["b", "a"], {"X": {"a": True, "b": False}, "Y": {"a": False, "b": True}})

        self.assertEqual(cat.traits, ("b", "a"))
        self.assertEqual(list(cat.entities), ["X", "Y"])
        self.assertIsInstance(cat.entities["X"], Entity)
        self.assertFalse(cat.entities["X"].value("b"))

    def test_missing_trait_fails_fast(self):
        """Test an entity without a value for every trait is rejected"""
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", ["a", "b"], {"X": {"a": True}})

    def test_undeclared_trait(self):
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", ["a"], {"X": {"a": True, "b": False}})

    def test_non_boolean_value(self):
        """Test 0/1 and strings are not accepted as trait values"""
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", ["a"], {"X": {"a": 1}})
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", ["a"], {"X": {"a": "yes"}})

    def test_duplicate_trait(self):
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", ["a", "a"], {})

    def test_traits_not_a_list(self):
        """Test a string of traits is not split into letters"""
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", "ab", {"X": {"a": True, "b": True}})

    def test_wrong_container_types(self):
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", ["a"], {"X": ["a"]})
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", ["a"], [("X", {"a": True})])
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", ["a"], {"X": {"a": True}}, questions=[("a", "A?")])

    def test_question_for_undeclared_trait(self):
        with self.assertRaises(MalformedKnowledgeBase):
            Category("c", ["a"], {"X": {"a": True}}, questions={"b": "B?"})

    def test_read_only_views(self):
        """Test the category cannot be changed through its lookups"""
        cat = cartoon_character()

        with self.assertRaises(TypeError):
            cat.entities["Mickey"] = None
        with self.assertRaises(TypeError):
            cat.entities["Genie"].traits["is_blue"] = False
        with self.assertRaises(TypeError):
            cat.questions["is_blue"] = "?"


class TestKnowledgeBase(unittest.TestCase):
    """Tests for lookups on the knowledge base"""

    def setUp(self):
        self.kb = default_kb()

    def test_categories(self):
        self.assertEqual(self.kb.categories(), ["cartoon_character", "animal"])

    def test_traits_of(self):
        self.assertEqual(self.kb.traitsOf("cartoon_character"),
                         ("is_animal", "is_blue", "can_fly", "wears_pants", "is_disney"))

    def test_entities_of(self):
        self.assertEqual(list(self.kb.entitiesOf("cartoon_character")),
                         ["Daffy Duck", "Stitch", "Donald Duck", "Sonic", "Genie"])

    def test_questions_of(self):
        self.assertEqual(self.kb.questionsOf("cartoon_character")["is_blue"], "Is your character primarily blue?")

    def test_unknown_category(self):
        """Test every lookup fails with UnknownCategory"""
        with self.assertRaises(UnknownCategory):
            self.kb.traitsOf("pokemon")
        with self.assertRaises(UnknownCategory):
            self.kb.entitiesOf("pokemon")
        with self.assertRaises(UnknownCategory):
            self.kb.questionsOf("pokemon")

    def test_register_twice(self):
        with self.assertRaises(MalformedKnowledgeBase):
            self.kb.addCategory(cartoon_character())

    def test_animal_category_complete(self):
        """Test the animal category has enough traits to exhaust the default budget"""
        cat = animal()
        self.assertGreater(len(cat.traits), 10)
        for entity in cat.entities.values():
            self.assertEqual(set(entity.traits), set(cat.traits))


class TestLoading(unittest.TestCase):
    """Tests for building a knowledge base from plain data"""

    data = {
        "fruit": {
            "traits": ["is_red", "is_round"],
            "questions": {"is_red": "Is it red?"},
            "entities": {
                "Apple": {"is_red": True, "is_round": True},
                "Banana": {"is_red": False, "is_round": False},
            },
        }
    }

    def test_from_dict(self):
        kb = KnowledgeBase.fromDict(self.data)

        self.assertEqual(kb.categories(), ["fruit"])
        self.assertEqual(kb.traitsOf("fruit"), ("is_red", "is_round"))
        self.assertEqual(dict(kb.questionsOf("fruit")), {"is_red": "Is it red?"})

    def test_from_dict_missing_keys(self):
        with self.assertRaises(MalformedKnowledgeBase):
            KnowledgeBase.fromDict({"fruit": {"traits": ["is_red"]}})

    def test_from_dict_partial_entity(self):
        data = {"fruit": {"traits": ["is_red", "is_round"], "entities": {"Apple": {"is_red": True}}}}
        with self.assertRaises(MalformedKnowledgeBase):
            KnowledgeBase.fromDict(data)

    def test_from_dict_entity_as_list(self):
        """Test an entity given as a list of traits is rejected as malformed"""
        with self.assertRaises(MalformedKnowledgeBase):
            KnowledgeBase.fromDict({"c": {"traits": ["a"], "entities": {"X": ["a"]}}})

    def test_from_dict_traits_as_string(self):
        with self.assertRaises(MalformedKnowledgeBase):
            KnowledgeBase.fromDict({"c": {"traits": "ab", "entities": {"X": {"a": True, "b": False}}}})

    def test_from_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "kb.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.data, f)

            kb = KnowledgeBase.fromJSON(path)

        self.assertEqual(list(kb.entitiesOf("fruit")), ["Apple", "Banana"])


if __name__ == '__main__':
    unittest.main()
