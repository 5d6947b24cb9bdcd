"""
config.py - Solver Configuration Settings
==========================================
Central configuration for the branch and bound TSP solver.
"""

from typing import Dict, Any


class Config:
    """System-wide configuration settings."""

    # ============================================================================
    # SEARCH CONFIGURATION
    # ============================================================================

    SEARCH = {
        'root_city': 0,           # Every partial tour starts here
        'depth_slack': 2,         # Deeper node wins at a depth gap of at least this
        'time_limit': 60.0,       # seconds
        'log_interval': 10000,    # Loop iterations between progress logs
        'warm_start': 'greedy',   # 'greedy' or 'random'
        'random_attempts': 1000
    }

    # ============================================================================
    # PRIORITY QUEUE CONFIGURATION
    # ============================================================================

    QUEUE = {
        'initial_capacity': 20,
        'index_cleanup_ratio': 1.2   # Compact index when it outgrows the heap
    }

    # ============================================================================
    # LOGGING CONFIGURATION
    # ============================================================================

    LOGGING = {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'date_format': '%Y-%m-%d %H:%M:%S',
        'file': None,
        'max_bytes': 10 * 1024 * 1024,  # 10 MB
        'backup_count': 5,
        'console_output': True
    }

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key."""
        keys = key.split('.')
        value = cls

        for k in keys:
            if isinstance(value, dict):
                if k not in value:
                    return default
                value = value[k]
            elif hasattr(value, k):
                value = getattr(value, k)
            else:
                return default

        return value

    @classmethod
    def set(cls, key: str, value: Any):
        """Set configuration value by dot-notation key."""
        keys = key.split('.')
        target = cls

        for k in keys[:-1]:
            if isinstance(target, dict) and k in target:
                target = target[k]
            elif not isinstance(target, dict) and hasattr(target, k):
                target = getattr(target, k)
            else:
                raise KeyError(f"Configuration key not found: {key}")

        final_key = keys[-1]
        if isinstance(target, dict):
            target[final_key] = value
        elif hasattr(target, final_key):
            setattr(target, final_key, value)
        else:
            raise KeyError(f"Cannot set configuration key: {key}")

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result = {}

        for attr in dir(cls):
            if not attr.startswith('_') and attr.isupper():
                value = getattr(cls, attr)
                if not callable(value):
                    result[attr] = dict(value) if isinstance(value, dict) else value

        return result

    @classmethod
    def from_file(cls, filepath: str):
        """Load configuration from JSON or YAML file."""
        import json

        with open(filepath, 'r') as f:
            if filepath.endswith('.json'):
                config_data = json.load(f)
            elif filepath.endswith(('.yml', '.yaml')):
                import yaml
                config_data = yaml.safe_load(f)
            else:
                raise ValueError(f"Unsupported config file format: {filepath}")

        for key, value in (config_data or {}).items():
            if hasattr(cls, key):
                current = getattr(cls, key)
                if isinstance(current, dict) and isinstance(value, dict):
                    # Sections are merged so partial files keep the defaults
                    current.update(value)
                else:
                    setattr(cls, key, value)

    @classmethod
    def save_to_file(cls, filepath: str):
        """Save configuration to JSON or YAML file."""
        import json

        config_data = cls.to_dict()

        with open(filepath, 'w') as f:
            if filepath.endswith('.json'):
                json.dump(config_data, f, indent=2, default=str)
            elif filepath.endswith(('.yml', '.yaml')):
                import yaml
                yaml.safe_dump(config_data, f, default_flow_style=False)
            else:
                raise ValueError(f"Unsupported config file format: {filepath}")
