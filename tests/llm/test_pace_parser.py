import unittest

from llm import PaceAdvice, PaceResponseError, PaceResponseParser
from llm.llama_backend import build_gbnf_schema


class PaceResponseParserTests(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = PaceResponseParser()

    def test_parses_strict_json(self) -> None:
        advice = self.parser.parse('{"animation_pace": 0.8, "reasoning": "  calme  "}')
        self.assertEqual(PaceAdvice(pace=0.8, reasoning="calme"), advice)

    def test_extracts_object_from_surrounding_text(self) -> None:
        advice = self.parser.parse('Voici : {"animation_pace": 1, "reasoning": "fin"} merci')
        self.assertEqual(1.0, advice.pace)

    def test_clamps_out_of_range_values(self) -> None:
        self.assertEqual(1.0, self.parser.parse('{"animation_pace": 3.5}').pace)
        self.assertEqual(0.0, self.parser.parse('{"animation_pace": -2}').pace)

    def test_missing_reasoning_defaults_to_empty(self) -> None:
        advice = self.parser.parse('{"animation_pace": 0.5}')
        self.assertEqual("", advice.reasoning)

    def test_rejects_unusable_output(self) -> None:
        for content in (
            "",
            "pas de json",
            "[0.5]",
            '{"reasoning": "rien"}',
            '{"animation_pace": "vite"}',
            '{"animation_pace": true}',
            '{"animation_pace": NaN}',
        ):
            with self.subTest(content=content):
                with self.assertRaises(PaceResponseError):
                    self.parser.parse(content)

    def test_grammar_names_expected_fields(self) -> None:
        grammar = build_gbnf_schema()
        self.assertIn('\\"animation_pace\\"', grammar)
        self.assertIn('\\"reasoning\\"', grammar)
        self.assertNotIn("__PACE__", grammar)


if __name__ == "__main__":
    unittest.main()
