pytest_plugins = ["foxdie.testing.conftest"]
