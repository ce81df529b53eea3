import unittest
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../../src'))

from reachability.errors import ConfigurationError
from reachability.localisation import LocalisationKeyParser


class TestLocalisationKeyParser(unittest.TestCase):
    """Unit tests for accessor-class key extraction"""

    def setUp(self):
        """Set up a parser for the intl_utils accessor class"""
        self.parser = LocalisationKeyParser('S')

    def test_context_bindings(self):
        """Test of(context), current and maybeOf(context)?"""
        self.assertEqual(self.parser.parse('S.of(context).app_name'), ['app_name'])
        self.assertEqual(self.parser.parse('S.current.app_name'), ['app_name'])
        self.assertEqual(self.parser.parse('S.maybeOf(context)?.app_name'), ['app_name'])

    def test_multi_line(self):
        """Test chains wrapped by the formatter"""
        inputs = [
            'S.of(context)\n            .app_name',
            'S.current\n        .app_name',
            'S.maybeOf(context)\n        ?.app_name',
            'S\n        .of(context)\n            .app_name',
            'S\n        .current\n        .app_name',
            'S\n        .maybeOf(context)\n        ?.app_name',
        ]
        for text in inputs:
            with self.subTest(text=text):
                self.assertEqual(self.parser.parse(text), ['app_name'])

    def test_multiple(self):
        """Test every occurrence is returned in order"""
        text = ('S.of(context).app_name, S.of(context)\n'
                '        .title\n'
                '        S.maybeOf(context)?.subtitle')
        self.assertEqual(self.parser.parse(text), ['app_name', 'title', 'subtitle'])

    def test_multiple_as_if_labels(self):
        """Test usages inside named arguments"""
        text = ('t: S.of(context).app_name,\n'
                '        k:S.current.app_name\n'
                '        e:S.maybeOf(ctx)?.app_name')
        self.assertEqual(self.parser.parse(text), ['app_name', 'app_name', 'app_name'])

    def test_class_name_inside_other_words(self):
        """Test unrelated capital S before a usage does not stop the scan"""
        text = "String label = Scaffold.of(context).toString() + S.of(context).app_name;"
        self.assertEqual(self.parser.parse(text), ['app_name'])

    def test_dotted_key(self):
        """Test dotted trailing identifiers are kept whole"""
        self.assertEqual(self.parser.parse('S.current.settings.title'), ['settings.title'])

    def test_no_usage(self):
        """Test text without accessor usage"""
        self.assertEqual(self.parser.parse("Text('hello')"), [])

    def test_custom_class_name(self):
        """Test another accessor class"""
        parser = LocalisationKeyParser('AppLocalizations')
        text = 'AppLocalizations.of(context).welcome; S.of(context).ignored'
        self.assertEqual(parser.parse(text), ['welcome'])

    def test_empty_class_name(self):
        """Test a missing class name is a configuration error"""
        with self.assertRaises(ConfigurationError):
            LocalisationKeyParser('')


if __name__ == '__main__':
    unittest.main()
