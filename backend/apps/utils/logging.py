import logging
import json
import re


class CorrelationIdFilter(logging.Filter):
    """
    Copies the current request's correlation id onto every log record.
    """
    def filter(self, record):
        from apps.core.middleware import get_correlation_id

        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or "N/A"
        return True


class PIIMaskingJsonFormatter(logging.Formatter):
    """
    Structured JSON logging with PII masking.
    Customer reviews carry names, e-mails and phone numbers; none of it
    should reach the log aggregator in clear text.
    """

    SENSITIVE_PATTERNS = {
        r'"password":\s*".*?"': '"password": "***MASKED***"',
        r'"token":\s*".*?"': '"token": "***MASKED***"',
        r'"access":\s*".*?"': '"access": "***MASKED***"',
        r'"refresh":\s*".*?"': '"refresh": "***MASKED***"',
        r'key=[A-Za-z0-9_\-]+': 'key=***MASKED***',
        r'[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}': '***EMAIL***',
        r'"phone":\s*"\+?(\d{2,4})[\d /\-]{4,}"': r'"phone": "\1******"',
    }

    SENSITIVE_KEYS = {'password', 'token', 'access', 'refresh', 'secret', 'key', 'api_key', 'email', 'phone'}

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "path": record.pathname,
            "line_no": record.lineno,
            "correlation_id": getattr(record, "correlation_id", "N/A"),
        }

        if hasattr(record, "metadata") and isinstance(record.metadata, dict):
            log_record["metadata"] = self._recursive_scrub(record.metadata)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        try:
            json_output = json.dumps(log_record)
        except (TypeError, ValueError):
            log_record["metadata"] = str(getattr(record, "metadata", ""))
            json_output = json.dumps(log_record)

        for pattern, replacement in self.SENSITIVE_PATTERNS.items():
            json_output = re.sub(pattern, replacement, json_output)

        return json_output

    def _recursive_scrub(self, data, depth=0):
        """
        Recursively traverse dicts/lists to mask sensitive keys.
        Depth is capped so self-referencing payloads cannot blow the stack.
        """
        if depth > 10:
            return "[MAX_DEPTH_EXCEEDED]"

        if isinstance(data, dict):
            return {
                k: ("***MASKED***" if str(k).lower() in self.SENSITIVE_KEYS and isinstance(v, (str, int))
                    else self._recursive_scrub(v, depth + 1))
                for k, v in data.items()
            }
        elif isinstance(data, list):
            return [self._recursive_scrub(i, depth + 1) for i in data]

        return data
