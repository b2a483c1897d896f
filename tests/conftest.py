pytest_plugins = ["satis_publisher.testing.conftest"]
