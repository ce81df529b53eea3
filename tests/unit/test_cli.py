import unittest
import sys
import os
import json
import tempfile
from pathlib import Path

from click.testing import CliRunner

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../../src'))

from cli import main

PUBSPEC = """name: app
dependencies:
  http: ^1.0.0
  provider: ^6.0.0
flutter:
  assets:
    - assets/images/
"""


def write_files(root, files):
    for name, contents in files.items():
        path = Path(root) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents, encoding='utf-8')


class TestCli(unittest.TestCase):
    """Unit tests for the command line interface"""

    def setUp(self):
        self.runner = CliRunner()
        self.tmp = tempfile.TemporaryDirectory()
        self.root = self.tmp.name
        write_files(self.root, {
            'pubspec.yaml': PUBSPEC,
            'lib/main.dart': "import 'package:app/home.dart';\nimport 'package:http/http.dart';\n",
            'lib/home.dart': "final logo = Image.asset('assets/images/logo.png');\n",
            'lib/old.dart': "void old() {}\n",
            'assets/images/logo.png': 'png',
            'assets/images/unused.png': 'png',
        })

    def tearDown(self):
        self.tmp.cleanup()

    def test_reports_unused_items(self):
        """Test unused items are printed and the exit code is 1"""
        result = self.runner.invoke(main, [self.root, '-a', '-d'])

        self.assertEqual(result.exit_code, 1)
        self.assertIn('Dart Unused Report', result.output)
        self.assertIn('lib/old.dart', result.output)
        self.assertIn('assets/images/unused.png', result.output)
        self.assertIn('provider', result.output)
        self.assertNotIn('Unreferenced Labels', result.output)

    def test_clean_project(self):
        """Test a project with nothing unused exits with 0"""
        os.remove(os.path.join(self.root, 'lib', 'old.dart'))
        result = self.runner.invoke(main, [self.root])

        self.assertEqual(result.exit_code, 0)
        self.assertIn('Unreferenced Files (0):', result.output)
        self.assertIn('Total unused items: 0', result.output)

    def test_file_argument_uses_its_directory(self):
        """Test passing pubspec.yaml analyses its project"""
        result = self.runner.invoke(main, [os.path.join(self.root, 'pubspec.yaml')])

        self.assertEqual(result.exit_code, 1)
        self.assertIn('lib/old.dart', result.output)

    def test_not_a_flutter_project(self):
        """Test a missing pubspec.yaml exits with 2"""
        os.remove(os.path.join(self.root, 'pubspec.yaml'))
        result = self.runner.invoke(main, [self.root])

        self.assertEqual(result.exit_code, 2)
        self.assertIn('Error:', result.output)

    def test_missing_entry(self):
        """Test an unreadable entry file exits with 2"""
        result = self.runner.invoke(main, [self.root, '--entry', 'lib/gone.dart'])

        self.assertEqual(result.exit_code, 2)
        self.assertIn('lib/gone.dart', result.output)

    def test_json_output(self):
        """Test --output writes every category"""
        output = os.path.join(self.root, 'report.json')
        result = self.runner.invoke(main, [self.root, '-d', '--output', output])

        self.assertEqual(result.exit_code, 1)
        self.assertIn('Report written to', result.output)
        with open(output, 'r', encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(data['unreferenced_files'], ['lib/old.dart'])
        self.assertEqual(data['unused_dependencies'], ['provider'])
        self.assertEqual(data['unreferenced_assets'], [])

    def test_remove_with_yes(self):
        """Test --remove --yes deletes unreferenced files"""
        result = self.runner.invoke(main, [self.root, '--remove', '--yes'])

        self.assertEqual(result.exit_code, 1)
        self.assertIn('Removed 1 files', result.output)
        self.assertFalse(os.path.exists(os.path.join(self.root, 'lib', 'old.dart')))
        self.assertTrue(os.path.exists(os.path.join(self.root, 'lib', 'home.dart')))

    def test_remove_keeps_dotted_entry(self):
        """Test --remove never deletes the entry file when given as ./lib/main.dart"""
        result = self.runner.invoke(main, [self.root, '--entry', './lib/main.dart', '--remove', '--yes'])

        self.assertEqual(result.exit_code, 1)
        self.assertIn('Removed 1 files', result.output)
        self.assertTrue(os.path.exists(os.path.join(self.root, 'lib', 'main.dart')))
        self.assertFalse(os.path.exists(os.path.join(self.root, 'lib', 'old.dart')))

    def test_remove_declined(self):
        """Test answering no keeps the files"""
        result = self.runner.invoke(main, [self.root, '--remove'], input='n\n')

        self.assertEqual(result.exit_code, 1)
        self.assertNotIn('Removed', result.output)
        self.assertTrue(os.path.exists(os.path.join(self.root, 'lib', 'old.dart')))

    def test_config_option(self):
        """Test an explicit config file is used"""
        config = os.path.join(self.root, 'custom.yaml')
        write_files(self.root, {'custom.yaml': "deps:\n  ignore:\n    - provider\n"})
        result = self.runner.invoke(main, [self.root, '-d', '--config', config])

        self.assertIn('Unused Dependencies (0):', result.output)

    def test_missing_config_option(self):
        """Test a missing explicit config file exits with 2"""
        result = self.runner.invoke(main, [self.root, '--config', os.path.join(self.root, 'nope.yaml')])
        self.assertEqual(result.exit_code, 2)

    def test_labels_and_locator(self):
        """Test label and locator sections are printed when enabled"""
        write_files(self.root, {
            'lib/l10n/intl_en.arb': json.dumps({'hello': 'Hello', 'bye': 'Bye'}),
            'lib/home.dart': (
                "final logo = Image.asset('assets/images/logo.png');\n"
                "final text = AppLocalizations.of(context).hello;\n"
                "void setup() => locator.registerSingleton<Api>(Api());\n"
            ),
        })
        result = self.runner.invoke(main, [self.root, '-l', '-g'])

        self.assertEqual(result.exit_code, 1)
        self.assertIn('Unreferenced Labels (1):', result.output)
        self.assertIn('bye', result.output)
        self.assertIn('Unused Registrations (1):', result.output)
        self.assertIn('Api', result.output)


if __name__ == '__main__':
    unittest.main()
