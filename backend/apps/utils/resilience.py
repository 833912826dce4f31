# apps/utils/resilience.py
import logging
from functools import wraps
from django.core.cache import cache

logger = logging.getLogger(__name__)

class CircuitBreakerOpenException(Exception):
    pass

class CircuitBreaker:
    """
    Prevents cascading failures by stopping requests to a failing service.
    Only exceptions listed in `tracked_exceptions` count as failures, so
    well-formed "no result" answers from a provider never trip the circuit.
    """
    def __init__(self, service_name, failure_threshold=5, recovery_timeout=60, tracked_exceptions=(Exception,)):
        self.service_name = service_name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.tracked_exceptions = tracked_exceptions
        self.key_failures = f"cb:fails:{service_name}"
        self.key_open = f"cb:open:{service_name}"

    def __call__(self, func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if self.is_open():
                logger.warning(f"Circuit OPEN: {self.service_name}. Fast failing.")
                raise CircuitBreakerOpenException(f"{self.service_name} is temporarily down")

            try:
                result = func(*args, **kwargs)
            except self.tracked_exceptions:
                self._safe_record_failure()
                raise

            self._safe_reset()
            return result

        return wrapper

    def is_open(self):
        # Fail open if the cache itself is unreachable
        try:
            return bool(cache.get(self.key_open))
        except Exception as e:
            logger.error(f"CircuitBreaker cache check failed: {e}")
            return False

    def _safe_record_failure(self):
        try:
            # add() is a no-op when the key exists; it only sets the window on the first failure
            cache.add(self.key_failures, 0, timeout=self.recovery_timeout)
            fails = cache.incr(self.key_failures)

            if fails >= self.failure_threshold:
                logger.critical(f"Circuit TRIPPED for {self.service_name}!")
                cache.set(self.key_open, "OPEN", timeout=self.recovery_timeout)
                cache.delete(self.key_failures)
        except Exception as e:
            logger.error(f"CircuitBreaker failure bookkeeping failed: {e}")

    def _safe_reset(self):
        try:
            cache.delete(self.key_failures)
        except Exception as e:
            logger.error(f"CircuitBreaker reset failed: {e}")
