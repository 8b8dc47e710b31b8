"""Config loading: YAML file merged over the packaged config.yaml.example."""
