from __future__ import annotations
from datetime import datetime, timezone
from typing import Sequence
from flask import Flask, request, jsonify
from services.api import dashboard
from services.bucketing.axes import RepartitionType
from services.bucketing.errors import ConfigurationError
from services.bucketing.frequency import Frequency
from services.config.env import get_api_config, get_defaults_config, get_locale_config, get_log_config
from services.storage.memory import InMemoryRepository
from services.storage.repository import DataType, DataValueRepository, NotFoundError

import os
import threading
import logging

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return get_api_config().api_key


def _get_weekday_labels() -> Sequence[str]:
    return app.config.get('WEEKDAY_LABELS') or get_locale_config().weekday_labels


_default_repo: InMemoryRepository | None = None
_default_repo_lock = threading.Lock()


def _get_repository() -> DataValueRepository:
    global _default_repo
    repo = app.config.get('REPOSITORY')
    if repo is not None:
        return repo
    with _default_repo_lock:
        if _default_repo is None:
            fixture = os.environ.get('DATA_FIXTURE')
            _default_repo = InMemoryRepository.from_json(fixture) if fixture else InMemoryRepository()
        return _default_repo


def _parse_date(value: str) -> datetime:
    """ISO date or datetime as naive UTC; offsets are converted to UTC."""
    d = datetime.fromisoformat(value)
    if d.tzinfo is not None:
        d = d.astimezone(timezone.utc).replace(tzinfo=None)
    return d


def _date_range(start: str | None, end: str | None) -> tuple[datetime, datetime]:
    """Parse route dates; end covers its whole day. Naive datetimes are UTC."""
    start_dt = _parse_date(start) if start else get_defaults_config().start_date
    if end:
        end_dt = _parse_date(end).replace(hour=23, minute=59, second=59, microsecond=0)
    else:
        end_dt = datetime.now(timezone.utc).replace(tzinfo=None)
    return start_dt, end_dt


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'error': 'unauthorized'}), 401
    return None


@app.before_request
def _auth():
    if request.path.startswith('/data/'):
        return _check_api_key()
    return None


@app.errorhandler(ConfigurationError)
def _bad_key(e: ConfigurationError):
    logger.info("rejected %s: %s", request.path, e)
    return jsonify({'error': str(e)}), 400


@app.errorhandler(ValueError)
def _bad_value(e: ValueError):
    logger.info("rejected %s: %s", request.path, e)
    return jsonify({'error': f'invalid parameter: {e}'}), 400


@app.errorhandler(NotFoundError)
def _not_found(e: NotFoundError):
    logger.info("not found %s: %s", request.path, e)
    return jsonify({'error': 'not_found', 'detail': str(e)}), 404


def _ranged(rule: str):
    """Register rule with optional trailing /<start> and /<start>/<end>."""
    def decorator(fn):
        app.get(rule, defaults={'start': None, 'end': None})(fn)
        app.get(f'{rule}/<start>', defaults={'end': None})(fn)
        app.get(f'{rule}/<start>/<end>')(fn)
        return fn
    return decorator


@_ranged('/data/<place_id>/repartition/<data_type>/<repartition_type>')
def get_repartition(place_id: str, data_type: str, repartition_type: str, start, end):
    rtype = RepartitionType.from_key(repartition_type)
    dtype = DataType.from_key(data_type)
    start_dt, end_dt = _date_range(start, end)
    payload = dashboard.repartition(
        _get_repository(), place_id, dtype, rtype, start_dt, end_dt, _get_weekday_labels()
    )
    return jsonify(payload)


@_ranged('/data/<place_id>/evolution/<data_type>/<frequency>')
def get_evolution(place_id: str, data_type: str, frequency: str, start, end):
    freq = Frequency.from_key(frequency)
    dtype = DataType.from_key(data_type)
    start_dt, end_dt = _date_range(start, end)
    return jsonify(dashboard.evolution(_get_repository(), place_id, dtype, freq, start_dt, end_dt))


@_ranged('/data/<place_id>/sum-group/<data_type>/<frequency>/<group_by>')
def get_sum_group_by(place_id: str, data_type: str, frequency: str, group_by: str, start, end):
    freq = Frequency.from_key(frequency)
    dtype = DataType.from_key(data_type)
    start_dt, end_dt = _date_range(start, end)
    payload = dashboard.sum_group_by(
        _get_repository(), place_id, dtype, freq, group_by, start_dt, end_dt, _get_weekday_labels()
    )
    return jsonify(payload)


@_ranged('/data/<place_id>/sum/<data_type>')
def get_sum(place_id: str, data_type: str, start, end):
    dtype = DataType.from_key(data_type)
    start_dt, end_dt = _date_range(start, end)
    return jsonify(dashboard.total(_get_repository(), place_id, dtype, start_dt, end_dt))


def _statistic(kind: str, place_id: str, data_type: str, frequency: str, start, end):
    freq = Frequency.from_key(frequency)
    dtype = DataType.from_key(data_type)
    start_dt, end_dt = _date_range(start, end)
    return jsonify(dashboard.statistic(_get_repository(), place_id, dtype, freq, start_dt, end_dt, kind))


@_ranged('/data/<place_id>/avg/<data_type>/<frequency>')
def get_average(place_id: str, data_type: str, frequency: str, start, end):
    return _statistic('avg', place_id, data_type, frequency, start, end)


@_ranged('/data/<place_id>/max/<data_type>/<frequency>')
def get_max(place_id: str, data_type: str, frequency: str, start, end):
    return _statistic('max', place_id, data_type, frequency, start, end)


@_ranged('/data/<place_id>/min/<data_type>/<frequency>')
def get_min(place_id: str, data_type: str, frequency: str, start, end):
    return _statistic('min', place_id, data_type, frequency, start, end)


@_ranged('/data/<place_id>/inf/<data_type>/<value>/<frequency>')
def get_number_inf(place_id: str, data_type: str, value: str, frequency: str, start, end):
    threshold = float(value)
    freq = Frequency.from_key(frequency)
    dtype = DataType.from_key(data_type)
    start_dt, end_dt = _date_range(start, end)
    return jsonify(dashboard.count_below(_get_repository(), place_id, dtype, threshold, freq, start_dt, end_dt))


@_ranged('/data/<place_id>/xy/<data_type_x>/<data_type_y>/<frequency>')
def get_xy(place_id: str, data_type_x: str, data_type_y: str, frequency: str, start, end):
    freq = Frequency.from_key(frequency)
    dtype_x = DataType.from_key(data_type_x)
    dtype_y = DataType.from_key(data_type_y)
    start_dt, end_dt = _date_range(start, end)
    return jsonify(dashboard.xy(_get_repository(), place_id, dtype_x, dtype_y, freq, start_dt, end_dt))


if __name__ == '__main__':
    logging.basicConfig(level=get_log_config().level)
    app.run(host='0.0.0.0', port=8000)
