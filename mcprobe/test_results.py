import math
import unittest

from mcprobe.config import Settings
from mcprobe.registry import SocketRegistry
from mcprobe.results import (DEFAULT_PING_MS, DetectionOutcome, Edition, Failure, LatencyEstimate,
                             LatencySource, StatusResult, Success, clamp_ping, failure_cause,
                             reconcile_latency, reported_latency)


def make_result(edition=Edition.JAVA, ping=42, favicon=None):
    return StatusResult(edition=edition, version='1.21.4', online_players=3, max_players=20,
                        description='hello', ping=ping, server_address='example.org:25565', favicon=favicon)


class TestLatency(unittest.TestCase):
    def test_clamp_bounds(self):
        self.assertEqual(clamp_ping(0), 1)
        self.assertEqual(clamp_ping(5000), 1000)
        self.assertEqual(clamp_ping(37.9), 37)

    def test_measured_wins(self):
        estimate = reconcile_latency(LatencyEstimate(30, LatencySource.MEASURED),
                                     LatencyEstimate(80, LatencySource.QUERY_REPORTED))
        self.assertEqual(estimate, LatencyEstimate(30, LatencySource.MEASURED))

    def test_falls_back_to_reported_then_default(self):
        reported = LatencyEstimate(80, LatencySource.QUERY_REPORTED)
        self.assertEqual(reconcile_latency(None, reported), reported)
        self.assertEqual(reconcile_latency(None, None), LatencyEstimate(DEFAULT_PING_MS, LatencySource.DEFAULT))

    def test_reconciled_value_is_clamped(self):
        self.assertEqual(reconcile_latency(LatencyEstimate(0, LatencySource.MEASURED)).value, 1)
        self.assertEqual(reconcile_latency(LatencyEstimate(2500, LatencySource.MEASURED)).value, 1000)

    def test_reported_latency_filters_junk(self):
        for value in [None, 'fast', True, 0, -5, math.nan, math.inf]:
            self.assertIsNone(reported_latency(value))
        self.assertEqual(reported_latency(12.7), LatencyEstimate(12, LatencySource.QUERY_REPORTED))


class TestOutcomeShapes(unittest.TestCase):
    def test_success_omits_missing_favicon(self):
        body = Success(make_result()).to_dict()
        self.assertTrue(body['success'])
        self.assertNotIn('favicon', body['data'])
        self.assertEqual(body['data']['edition'], 'java')
        self.assertEqual(body['data']['server_address'], 'example.org:25565')

    def test_failure_carries_cause(self):
        self.assertEqual(Failure('cannot reach java server', 'refused').to_dict(),
                         {'success': False, 'message': 'cannot reach java server', 'error': 'refused'})

    def test_detection_success(self):
        body = DetectionOutcome(Success(make_result(Edition.BEDROCK)), detected=True, edition=Edition.BEDROCK).to_dict()
        self.assertTrue(body['detected'])
        self.assertEqual(body['edition'], 'bedrock')
        self.assertNotIn('javaError', body)

    def test_detection_failure(self):
        body = DetectionOutcome(Failure('no edition', 'auto-detection failed'),
                                java_error='refused', bedrock_error='timed out').to_dict()
        self.assertFalse(body['success'])
        self.assertNotIn('detected', body)
        self.assertEqual(body['javaError'], 'refused')
        self.assertEqual(body['bedrockError'], 'timed out')

    def test_failure_cause(self):
        self.assertEqual(failure_cause(Failure('reason')), 'reason')
        self.assertEqual(failure_cause(Failure('reason', 'cause')), 'cause')
        self.assertEqual(failure_cause(RuntimeError()), 'RuntimeError')
        self.assertIsNone(failure_cause(Success(make_result())))


class TestSettings(unittest.TestCase):
    def test_defaults_respect_deadline_hierarchy(self):
        s = Settings()
        self.assertLessEqual(s.udp_deadline, s.ping_cap)
        self.assertLessEqual(s.ping_cap, s.bedrock_deadline)
        self.assertLessEqual(s.bedrock_deadline, s.detect_timeout)

    def test_inner_deadline_longer_than_outer_rejected(self):
        with self.assertRaises(ValueError):
            Settings(ping_cap=3.0)
        with self.assertRaises(ValueError):
            Settings(java_query_timeout=6.0)
        with self.assertRaises(ValueError):
            Settings(bedrock_query_timeout=2.5)

    def test_from_env(self):
        s = Settings.from_env({'PORT': '8080', 'NODE_ENV': 'development', 'PROBE_RACE_WINDOW': '0.5'})
        self.assertEqual(s.port, 8080)
        self.assertTrue(s.development)
        self.assertEqual(s.race_window, 0.5)
        self.assertFalse(Settings.from_env({}).development)


class _Transport:
    def __init__(self):
        self.closes = 0

    def close(self):
        self.closes += 1


class TestSocketRegistry(unittest.TestCase):
    def test_unregister_is_idempotent(self):
        registry = SocketRegistry()
        transport = _Transport()
        registry.register(transport)
        self.assertIn(transport, registry)
        registry.unregister(transport)
        registry.unregister(transport)
        self.assertEqual(len(registry), 0)

    def test_force_close_all(self):
        registry = SocketRegistry()
        transports = [_Transport(), _Transport()]
        for t in transports:
            registry.register(t)
        self.assertEqual(registry.force_close_all(), 2)
        self.assertEqual([t.closes for t in transports], [1, 1])
        self.assertEqual(registry.force_close_all(), 0)


if __name__ == '__main__':
    unittest.main()
