"""
Tests for the fixture step list
"""
import unittest

from fixture_preparer.config import Config
from fixture_preparer.core import FETCH, SLICE, TRANSCODE, FixtureStep, build_steps, validate_order
from fixture_preparer.errors import ConfigError


class TestBuildSteps(unittest.TestCase):

    def setUp(self):
        config = Config()
        self.steps = build_steps(config.get('source_url'), config.get('source_name'), config.excerpts())

    def test_targets_in_dependency_order(self):
        self.assertEqual(
            [s.target for s in self.steps],
            ['twentythousand.mp3', 'twentythousand.flac', 't01.mp3', 't02.mp3', 't01.flac', 't02.flac'],
        )

    def test_operations(self):
        self.assertEqual(
            [s.operation for s in self.steps],
            [FETCH, TRANSCODE, SLICE, SLICE, TRANSCODE, TRANSCODE],
        )

    def test_dependencies(self):
        deps = {s.target: s.dependencies for s in self.steps}
        self.assertEqual(deps['twentythousand.mp3'], ())
        self.assertEqual(deps['twentythousand.flac'], ('twentythousand.mp3',))
        self.assertEqual(deps['t01.mp3'], ('twentythousand.mp3',))
        self.assertEqual(deps['t02.mp3'], ('twentythousand.mp3',))
        self.assertEqual(deps['t01.flac'], ('t01.mp3',))
        self.assertEqual(deps['t02.flac'], ('t02.mp3',))

    def test_fetch_uses_source_url(self):
        self.assertEqual(self.steps[0].params['url'], Config().get('source_url'))

    def test_slice_ranges_and_stream_copy(self):
        slices = {s.target: s.params for s in self.steps if s.operation == SLICE}
        self.assertEqual(slices['t01.mp3'], {'start': '00:01:09', 'end': '00:02:00', 'stream_copy': True})
        self.assertEqual(slices['t02.mp3'], {'start': '00:02:00', 'end': '00:03:00', 'stream_copy': True})

    def test_numeric_bounds_are_normalised(self):
        steps = build_steps('http://x/a.mp3', 'a', [{'name': 'c', 'start': 69, 'end': 120}])
        self.assertEqual(steps[2].params['start'], '00:01:09')
        self.assertEqual(steps[2].params['end'], '00:02:00')

    def test_no_excerpts(self):
        steps = build_steps('http://x/a.mp3', 'a', [])
        self.assertEqual([s.target for s in steps], ['a.mp3', 'a.flac'])

    def test_describe(self):
        self.assertIn('fetch', self.steps[0].describe())
        self.assertIn('[00:01:09, 00:02:00)', self.steps[2].describe())
        self.assertEqual(self.steps[4].describe(), 'transcode t01.mp3 -> t01.flac')


class TestValidateOrder(unittest.TestCase):

    def test_dependency_produced_later_is_rejected(self):
        steps = [
            FixtureStep('b.flac', TRANSCODE, ('b.mp3',)),
            FixtureStep('b.mp3', FETCH, (), {'url': 'http://x'}),
        ]
        with self.assertRaises(ConfigError):
            validate_order(steps)

    def test_duplicate_target_is_rejected(self):
        with self.assertRaises(ConfigError):
            build_steps('http://x/a.mp3', 'a', [{'name': 'a', 'start': 0, 'end': 1}])

    def test_unknown_operation_is_rejected(self):
        with self.assertRaises(ConfigError):
            validate_order([FixtureStep('a.wav', 'render')])

    def test_valid_order_passes(self):
        validate_order([
            FixtureStep('a.mp3', FETCH, (), {'url': 'http://x'}),
            FixtureStep('a.flac', TRANSCODE, ('a.mp3',)),
        ])


if __name__ == '__main__':
    unittest.main()
