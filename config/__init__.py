from .yaml_config_loader import YamlConfigLoader, load_trajectory

__all__ = ["YamlConfigLoader", "load_trajectory"]
