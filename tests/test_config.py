import copy
import logging
import os
import unittest
from unittest import mock

import impulse
from impulse import core
from impulse.errors import InvalidArgument


class TestConfiguration(unittest.TestCase):

    def setUp(self):
        self._saved = copy.deepcopy(impulse._config)

    def tearDown(self):
        impulse._config.clear()
        impulse._config.update(self._saved)
        impulse._apply_configuration()

    def test_defaults(self):
        config = impulse.configure()
        self.assertEqual(config['backend']['default'], 'pyfftw')
        self.assertEqual(config['cache']['max_size'], 64)
        self.assertEqual(core.DEFAULT_BACKEND, 'pyfftw')

    def test_configure_with_dict(self):
        impulse.configure({'cache': {'max_size': 8}, 'threading': {'default_threads': 2}})
        self.assertEqual(core.MAX_CACHE_SIZE, 8)
        self.assertEqual(core.DEFAULT_THREADS, 2)
        # untouched keys keep their values
        self.assertEqual(impulse._config['backend']['default'], 'pyfftw')

    def test_configure_with_kwargs(self):
        impulse.configure(backend_default='numpy', planning_default_strategy='FFTW_MEASURE',
                          planning_auto_upgrade=False)
        self.assertEqual(core.DEFAULT_BACKEND, 'numpy')
        self.assertEqual(core.DEFAULT_PLANNER, 'FFTW_MEASURE')
        self.assertFalse(core.AUTO_UPGRADE)

    def test_returns_copy(self):
        config = impulse.configure()
        config['cache']['max_size'] = 1
        self.assertEqual(impulse._config['cache']['max_size'], 64)

    def test_invalid_values(self):
        with self.assertRaises(InvalidArgument):
            impulse.configure(cache_bogus=3)
        with self.assertRaises(InvalidArgument):
            impulse.configure(backend_default='cuda')
        with self.assertRaises(InvalidArgument):
            impulse.configure(logging_level='CHATTY')

    def test_rejected_value_keeps_previous_state(self):
        with self.assertRaises(InvalidArgument):
            impulse.configure(backend_default='cuda')
        self.assertEqual(impulse._config['backend']['default'], 'pyfftw')
        self.assertEqual(core.DEFAULT_BACKEND, 'pyfftw')

        # a valid call afterwards is not poisoned by the rejected one
        config = impulse.configure(cache_max_size=8)
        self.assertEqual(config['cache']['max_size'], 8)
        self.assertEqual(config['backend']['default'], 'pyfftw')
        self.assertEqual(core.MAX_CACHE_SIZE, 8)

    def test_rejected_value_rolls_back_earlier_settings(self):
        # cache is applied before the backend check fails
        with self.assertRaises(InvalidArgument):
            impulse.configure(cache_max_size=8, backend_default='cuda')
        self.assertEqual(core.MAX_CACHE_SIZE, self._saved['cache']['max_size'])
        self.assertEqual(impulse._config['cache']['max_size'], self._saved['cache']['max_size'])

        with self.assertRaises(InvalidArgument):
            impulse.configure({'threading': {'default_threads': 3}, 'logging': {'level': 'CHATTY'}})
        self.assertEqual(impulse._config['threading']['default_threads'], self._saved['threading']['default_threads'])
        self.assertEqual(impulse._config['logging']['level'], self._saved['logging']['level'])

    def test_logging_level(self):
        impulse.configure(logging_level='debug')
        self.assertEqual(logging.getLogger("impulse").level, logging.DEBUG)

    def test_package_logger(self):
        logger = logging.getLogger("impulse")
        self.assertFalse(logger.propagate)
        self.assertTrue(any(isinstance(h, logging.StreamHandler) for h in logger.handlers))

    def test_environment(self):
        env = {'IMPULSE_CACHE_MAX_SIZE': '16', 'IMPULSE_BACKEND_DEFAULT': 'numpy',
               'IMPULSE_PLANNING_AUTO_UPGRADE': 'off'}
        with mock.patch.dict(os.environ, env):
            impulse._load_env_config()
        self.assertEqual(core.MAX_CACHE_SIZE, 16)
        self.assertEqual(core.DEFAULT_BACKEND, 'numpy')
        self.assertFalse(core.AUTO_UPGRADE)

    def test_unknown_environment_setting(self):
        with mock.patch.dict(os.environ, {'IMPULSE_NOT_A_SETTING': '1'}):
            with self.assertLogs('impulse', level='WARNING'):
                impulse._load_env_config()

    def test_invalid_environment_value(self):
        threads = core.DEFAULT_THREADS
        env = {'IMPULSE_BACKEND_DEFAULT': 'cuda', 'IMPULSE_CACHE_MAX_SIZE': '16',
               'IMPULSE_THREADING_DEFAULT_THREADS': 'four'}
        with mock.patch.dict(os.environ, env):
            with self.assertLogs('impulse', level='WARNING') as logs:
                impulse._load_env_config()
        self.assertTrue(any('IMPULSE_BACKEND_DEFAULT' in line for line in logs.output))
        self.assertTrue(any('IMPULSE_THREADING_DEFAULT_THREADS' in line for line in logs.output))
        self.assertEqual(core.DEFAULT_THREADS, threads)
        # the bad variable is skipped, the good one still applies
        self.assertEqual(core.DEFAULT_BACKEND, 'pyfftw')
        self.assertEqual(impulse._config['backend']['default'], 'pyfftw')
        self.assertEqual(core.MAX_CACHE_SIZE, 16)


if __name__ == "__main__":
    unittest.main()
