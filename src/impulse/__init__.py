"""
Impulse: FFT planning and signal processing for Python.

this package builds reusable real FFT plans (factorization, twiddle tables,
packed real layout) and exposes FFT entry points with selectable
normalization on top of pluggable backends (pyFFTW by default, NumPy, or
the plan-driven reference executor). it also ships a few signal processing
helpers: Kaiser windows, least-squares FIR design, upfirdn resampling,
prime generation and linear feedback shift registers.

Basic usage:
    import numpy as np
    import impulse

    x = np.random.random(1000)
    y = impulse.fft(x)                      # full complex spectrum
    h = impulse.rfft(x, normalize='ortho')  # non-redundant half

Advanced usage:
    # Inspect the plan used for a length
    plan = impulse.get_plan(1000)
    plan.factors      # (2, 4, 5, 5, 5)

    # Run the transform on the plan-driven executor
    y = impulse.fft(x, backend='planned')
"""

import os
import copy
import logging


__version__ = '0.1.0'
# Import core functionality
from .core import (
    # Main FFT functions
    fft, ifft, rfft, irfft, fft_packed, dct, dst,

    # Normalization
    Normalization, scaling_factor,

    # Configuration functions
    set_default_backend, set_num_threads, set_planner_effort,
    set_max_cache_size, get_plan, get_stats, reset_metrics, clear_cache,

    # Core class for advanced users
    SmartFFT
)

# Plans and their building blocks
from .factorization import FactorKind, factorize, largest_prime_factor
from .twiddle import TwiddleGenerator, nth_root_of_unity
from .planning import (
    RealFFTPlan, PlanFactorDescriptor, new_real_fft_plan,
    required_twiddle_mem_size, describe_plan, analyze_length,

    # Planning optimization functions
    get_optimal_planner, get_optimal_threads,
    optimize_transform_shape, optimal_transform_size,

    # planning efforts
    PLANNER_ESTIMATE, PLANNER_MEASURE, PLANNER_PATIENT, PLANNER_EXHAUSTIVE,
)
from .packing import pack, unpack, symmetrize, symm_target_size, half_length
from .radix import execute, execute_packed

# Signal processing
from .signal import i0, kaiser, firls, upfirdn
from .primes import primes
from .lfsr import LFSR, LFSRType, LFSRInitState, lfsr_tap_example

from .errors import ImpulseError, InvalidArgument, ExecutionFailure

from . import core

# Configuration system
_config = {
    # Default configuration
    'cache': {
        'max_size': 64,
    },
    'backend': {
        'default': 'pyfftw',
    },
    'planning': {
        'default_strategy': PLANNER_ESTIMATE,
        'auto_upgrade': True,
    },
    'threading': {
        'default_threads': min(os.cpu_count() or 1, 4),
    },
    'logging': {
        'level': 'WARNING',
    }
}


def _update_nested_dict(d, u):
    """Update nested dictionary recursively."""
    for k, v in u.items():
        if isinstance(v, dict) and k in d and isinstance(d[k], dict):
            _update_nested_dict(d[k], v)
        else:
            d[k] = v


def _apply_configuration(config=None):
    """Apply configuration settings to module components."""
    if config is None:
        config = _config

    # Check the logging level first, it has no setter of its own
    level = str(config['logging']['level']).upper()
    if not isinstance(getattr(logging, level, None), int):
        raise InvalidArgument(f"Unknown logging level {config['logging']['level']!r}")

    # the setters validate values before touching the module constants
    core.set_max_cache_size(config['cache']['max_size'])
    core.set_default_backend(config['backend']['default'])
    core.set_planner_effort(config['planning']['default_strategy'])
    core.set_num_threads(config['threading']['default_threads'])
    core.AUTO_UPGRADE = bool(config['planning']['auto_upgrade'])
    logging.getLogger("impulse").setLevel(getattr(logging, level))


def configure(config_dict=None, **kwargs):
    """
    Configure impulse global settings.

    Args:
        config_dict: Dictionary with configuration settings
        **kwargs: Configuration settings as keyword arguments

    Returns:
        A copy of the configuration now in effect

    Raises:
        InvalidArgument: For an unknown key or a rejected value. The
            previous configuration stays in effect.

    Examples:
        # Configure with a dictionary
        impulse.configure({
            'cache': {'max_size': 128},
            'threading': {'default_threads': 8}
        })

        # Or with keyword arguments
        impulse.configure(
            planning_default_strategy='FFTW_MEASURE',
            backend_default='numpy'
        )
    """
    # Work on a copy so a rejected value leaves the current settings alone
    candidate = copy.deepcopy(_config)
    if config_dict:
        # Update nested dictionary recursively
        _update_nested_dict(candidate, config_dict)

    # Process kwargs (flattened config)
    for key, value in kwargs.items():
        section, _, name = key.partition('_')
        if section not in candidate or name not in candidate[section]:
            raise InvalidArgument(f"Unknown configuration key {key!r}")
        candidate[section][name] = value

    # Apply configuration
    try:
        _apply_configuration(candidate)
    except InvalidArgument:
        # the setters before the failing one already ran
        _apply_configuration(_config)
        raise

    _config.clear()
    _config.update(candidate)

    return {section: dict(values) for section, values in _config.items()}


def _load_env_config():
    """Load configuration from environment variables."""
    # Environment variable prefix
    prefix = "IMPULSE_"

    logger = logging.getLogger("impulse")
    for key, value in sorted(os.environ.items()):
        if not key.startswith(prefix):
            continue
        # Remove prefix and convert to lowercase
        config_key = key[len(prefix):].lower()
        section, _, name = config_key.partition('_')
        if section not in _config or name not in _config[section]:
            logger.warning(f"Ignoring unknown setting {key}")
            continue

        # Try to convert value to appropriate type
        if value.isdigit():
            value = int(value)
        elif value.lower() in ('true', 'yes', 'on'):
            value = True
        elif value.lower() in ('false', 'no', 'off'):
            value = False
        elif value.replace('.', '', 1).isdigit():
            value = float(value)

        # One bad variable must not keep the package from importing
        try:
            configure(**{config_key: value})
        except InvalidArgument as e:
            logger.warning(f"Ignoring {key}={os.environ[key]!r}: {e}")


# Initialize logging
def _setup_logging():
    """Set up default logging configuration."""
    logger = logging.getLogger("impulse")
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, _config['logging']['level']))
        # Don't propagate to root logger
        logger.propagate = False


_setup_logging()

# Load environment config at startup
_load_env_config()
