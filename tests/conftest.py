from hypothesis import HealthCheck, settings

pytest_plugins = ["repogate.testing.conftest"]

# Hypothesis builds its unicode character map on first use; on a cold
# cache that one-time cost trips the input-generation speed health check.
settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")
