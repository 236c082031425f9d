import unittest

from mcprobe.cli import load_settings, parser


class TestCli(unittest.TestCase):
    def test_flags_override_environment(self):
        args = parser.parse_args(['--host', '127.0.0.1', '-p', '8081'])
        settings = load_settings(args, {'HOST': '0.0.0.0', 'PORT': '3000', 'APP_ENV': 'development'})
        self.assertEqual((settings.host, settings.port), ('127.0.0.1', 8081))
        self.assertTrue(settings.development)

    def test_environment_used_without_flags(self):
        settings = load_settings(parser.parse_args([]), {'PORT': '9000'})
        self.assertEqual((settings.host, settings.port), ('0.0.0.0', 9000))

    def test_bad_timeout_hierarchy_rejected(self):
        with self.assertRaises(ValueError):
            load_settings(parser.parse_args([]), {'PROBE_PING_CAP': '9'})


if __name__ == '__main__':
    unittest.main()
