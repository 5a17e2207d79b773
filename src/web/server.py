#!/usr/bin/env python3
"""
================================================================================
WEB SERVER - JSON API for Family Reading Progress
================================================================================

Flask application exposing the family store and completion tracker over HTTP.
The handlers only check request shape, call the core and render results as
JSON; every core failure (TrackerError) becomes {"error": message} with the
error's status code.

API Endpoints:
    Families:
        POST   /api/families/register                  - Register a family
        POST   /api/families/<family>/login            - Check admin password
        GET    /api/families                           - List families
        POST   /api/families/<family>/members          - Add member (admin)
        DELETE /api/families/<family>/members/<member> - Remove member (admin)
        PUT    /api/families/<family>/chapters         - Replace distribution (admin)

    Progress:
        GET  /<family>/parts/<member>     - Member's parts and completed IDs
        GET  /<family>/status             - Completed IDs and totals per member
                                            (?view=counts for counts only)
        POST /<family>/complete           - Mark one part complete
        POST /<family>/completeall        - Mark all of a member's parts complete
        GET  /<family>/resetcompleted     - Reset the family's progress
        GET  /<family>/setAutoCompleters  - Complete all parts of auto completers

    Scheduler:
        GET  /api/schedule                - Next nightly reset

Startup (main):
    1. Logging in 'web' context, configs/config.json loaded
    2. Content file split into parts
    3. Family store loaded, built-in family ensured
    4. Nightly reset scheduler started
    5. Flask server on the configured host/port (default 0.0.0.0:3002)

Usage:
    python src/web/server.py
    python cli.py web

================================================================================
"""

import sys
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# Allow running as a script: python src/web/server.py
if __package__ in (None, ''):
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS

from src.core.content import Part, load_parts_file
from src.core.errors import InvalidInput, PersistenceError, TrackerError
from src.core.family_store import FamilyStore
from src.core.tracker import CompletionTracker
from src.utils.config import load_config
from src.utils.logger import setup_logging
from src.web.scheduler import ResetScheduler, parse_reset_time

logger = logging.getLogger("reading_tracker")

EXTENSION_KEY = 'reading_tracker'


@dataclass
class TrackerServices:
    """Everything the request handlers need, built once at startup"""
    store: FamilyStore
    tracker: CompletionTracker
    parts: List[Part] = field(default_factory=list)
    auto_completers: List[str] = field(default_factory=list)
    scheduler: Optional[ResetScheduler] = None
    reset_time: Optional[str] = None


def build_services(config: dict, load_content: bool = True, seed: bool = True) -> TrackerServices:
    """
    Load content and families according to config.

    Args:
        config: Result of load_config()
        load_content: Read and split the content file
        seed: Ensure the built-in (and legacy) families exist

    Raises:
        ContentLoadError: content file unreadable (only when load_content)
    """
    general = config['general']

    parts = []
    if load_content:
        parts = load_parts_file(Path(general['content_file']), general['part_delimiter'])

    store = FamilyStore(Path(general['families_file']), total_items=general['total_parts'])

    if seed:
        default_family = config['default_family']
        legacy_family = config['legacy_family']
        try:
            if default_family.get('enabled', True):
                store.ensure_default_family(default_family['name'], default_family['admin_password'])
            if legacy_family.get('enabled', True):
                store.ensure_legacy_family(legacy_family['name'], legacy_family['admin_password'])
        except PersistenceError as e:
            logger.warning(f"Built-in families seeded in memory only: {e}")

    return TrackerServices(
        store=store,
        tracker=CompletionTracker(store),
        parts=parts,
        auto_completers=list(config.get('auto_completers', [])),
        reset_time=config['scheduler'].get('reset_time'),
    )


api = Blueprint('reading_tracker', __name__)


def _services() -> TrackerServices:
    return current_app.extensions[EXTENSION_KEY]


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidInput("Request body must be a JSON object")
    return body


def _snapshot(family) -> dict:
    """Copy of a family's members, distribution and completion, taken under the store lock"""
    with _services().store.lock:
        data = family.summary()
        data['completedParts'] = {m: list(ids) for m, ids in family.completed.items()}
    return data


@api.app_errorhandler(TrackerError)
def handle_tracker_error(error: TrackerError):
    return jsonify(error.to_dict()), error.status_code


# ==========================================
# FAMILY MANAGEMENT API
# ==========================================

@api.route('/api/families/register', methods=['POST'])
def api_register_family():
    data = _json_body()
    family_name = data.get('familyName')
    members = data.get('members')
    admin_password = data.get('adminPassword')

    if not family_name or not members or not admin_password or not isinstance(members, list):
        raise InvalidInput("Family name, members list, and admin password are required")

    snapshot = _snapshot(_services().store.register(family_name, members, admin_password))
    return jsonify({
        'message': 'Family registered successfully',
        'familyName': snapshot['name'],
        'members': snapshot['members'],
        'chapterDistribution': snapshot['chapterDistribution'],
    })


@api.route('/api/families/<family_name>/login', methods=['POST'])
def api_login(family_name):
    data = _json_body()
    family = _services().store.login(family_name, data.get('password'))
    return jsonify({'message': 'Login successful', 'family': _snapshot(family)})


@api.route('/api/families', methods=['GET'])
def api_list_families():
    return jsonify({'families': _services().store.list_all()})


@api.route('/api/families/<family_name>/members', methods=['POST'])
def api_add_member(family_name):
    data = _json_body()
    family = _services().store.add_member(family_name, data.get('memberName'), data.get('adminPassword'))
    snapshot = _snapshot(family)
    return jsonify({
        'message': 'Member added successfully',
        'members': snapshot['members'],
        'chapterDistribution': snapshot['chapterDistribution'],
    })


@api.route('/api/families/<family_name>/members/<member_name>', methods=['DELETE'])
def api_remove_member(family_name, member_name):
    data = _json_body()
    password = data.get('adminPassword', request.args.get('adminPassword'))
    snapshot = _snapshot(_services().store.remove_member(family_name, member_name, password))
    return jsonify({
        'message': 'Member removed successfully',
        'members': snapshot['members'],
        'chapterDistribution': snapshot['chapterDistribution'],
    })


@api.route('/api/families/<family_name>/chapters', methods=['PUT'])
def api_set_distribution(family_name):
    data = _json_body()
    if 'chapterDistribution' not in data:
        raise InvalidInput("chapterDistribution is required")

    family = _services().store.set_distribution(
        family_name, data['chapterDistribution'], data.get('adminPassword'))
    return jsonify({
        'message': 'Chapter distribution updated successfully',
        'chapterDistribution': _snapshot(family)['chapterDistribution'],
    })


@api.route('/api/schedule', methods=['GET'])
def api_schedule():
    services = _services()
    next_run = services.scheduler.next_run_time() if services.scheduler else None
    return jsonify({
        'enabled': services.scheduler is not None,
        'resetTime': services.reset_time,
        'nextRun': next_run.isoformat() if next_run else None,
    })


# ==========================================
# PROGRESS API
# ==========================================

@api.route('/<family_name>/parts/<member_name>', methods=['GET'])
def api_member_parts(family_name, member_name):
    services = _services()
    return jsonify(services.tracker.member_parts(family_name, member_name, services.parts))


@api.route('/<family_name>/status', methods=['GET'])
def api_status(family_name):
    tracker = _services().tracker
    if request.args.get('view') == 'counts':
        return jsonify({'status': tracker.progress(family_name)})
    return jsonify({'status': tracker.status(family_name)})


@api.route('/<family_name>/complete', methods=['POST'])
def api_mark_complete(family_name):
    data = _json_body()
    part_id = data.get('partId')
    if not isinstance(part_id, int) or isinstance(part_id, bool):
        raise InvalidInput("Invalid user or part ID")

    services = _services()
    family = services.store.get(family_name)
    services.tracker.mark_complete(family, data.get('name'), part_id)
    return jsonify({'message': 'Part marked as completed', 'completedParts': _snapshot(family)['completedParts']})


@api.route('/<family_name>/completeall', methods=['POST'])
def api_complete_all(family_name):
    data = _json_body()
    completed = _services().tracker.complete_all(family_name, data.get('name'))
    return jsonify({
        'message': 'All Parts marked as completed:' + ','.join(str(i) for i in completed),
        'completed': completed,
    })


@api.route('/<family_name>/resetcompleted', methods=['GET'])
def api_reset_completed(family_name):
    _services().tracker.reset_family(family_name)
    return jsonify({'message': f'All completed parts have been reset for family {family_name}'})


@api.route('/<family_name>/setAutoCompleters', methods=['GET'])
def api_set_auto_completers(family_name):
    services = _services()
    applied = services.tracker.apply_auto_completers(family_name, services.auto_completers)
    return jsonify({
        'message': 'All AutoCompleters marked as completed:' + ','.join(applied),
        'autoCompleters': applied,
    })


def create_app(services: TrackerServices) -> Flask:
    """Flask app bound to one set of services"""
    app = Flask(__name__)
    app.json.ensure_ascii = False
    CORS(app)
    app.extensions[EXTENSION_KEY] = services
    app.register_blueprint(api)
    return app


def main() -> int:
    """Start the web server"""
    setup_logging('web')
    config = load_config()

    print("=" * 60)
    print("Family Reading Tracker - Web Server")

    try:
        services = build_services(config)
    except TrackerError as e:
        logger.error(f"Startup failed: {e.message}")
        return 1

    scheduler_config = config['scheduler']
    if scheduler_config.get('enabled', True):
        services.scheduler = ResetScheduler(
            services.tracker.reset_all,
            parse_reset_time(scheduler_config.get('reset_time', '22:00')),
        )
        services.scheduler.start()
        print("✓ Scheduler initialized")

    print("=" * 60)

    app = create_app(services)
    host = config['server']['host']
    port = int(config['server']['port'])
    logger.info(f"Server running on port {port}")
    try:
        app.run(host=host, port=port, debug=False, threaded=True)
    finally:
        if services.scheduler:
            services.scheduler.shutdown()
    return 0


if __name__ == '__main__':
    sys.exit(main())
