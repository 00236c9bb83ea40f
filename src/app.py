"""
Flask JSON API for single elimination brackets.
"""
import os
import re

import yaml
from filelock import FileLock, Timeout
from flask import Flask, jsonify, request

from brackets.elimination import get_bracket_display, get_champion
from brackets.errors import (
    AlreadyReported,
    BracketError,
    CorruptBracket,
    InvalidTransition,
    MatchNotFound,
    MatchNotReady,
)
from brackets.formats import load_game_modes, get_game_mode
from brackets.lifecycle import Tournament

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
GAME_MODES_FILE = os.environ.get('GAME_MODES_FILE', os.path.join(DATA_DIR, 'game_modes.yaml'))
LOCK_TIMEOUT = 10  # seconds

SLUG_PATTERN = re.compile(r'^[a-z0-9][a-z0-9-]*$')

CONFLICT_ERRORS = (AlreadyReported, InvalidTransition, MatchNotReady)


class TournamentNotFound(Exception):
    pass


def _tournament_file(slug: str) -> str:
    return os.path.join(DATA_DIR, f'{slug}.yaml')


def _tournament_lock(slug: str) -> FileLock:
    """Lock serializing all writes to one tournament's bracket."""
    os.makedirs(DATA_DIR, exist_ok=True)
    return FileLock(_tournament_file(slug) + '.lock', timeout=LOCK_TIMEOUT)


def load_tournament(slug: str, create: bool = False) -> Tournament:
    """Load a tournament from its YAML file."""
    path = _tournament_file(slug)
    if not os.path.exists(path):
        if create:
            return Tournament(name=slug)
        raise TournamentNotFound(slug)
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not data:
        app.logger.warning(f'Empty tournament file {path}')
        if create:
            return Tournament(name=slug)
        raise TournamentNotFound(slug)
    return Tournament.from_dict(data)


def save_tournament(slug: str, tournament: Tournament):
    """Save a tournament to its YAML file."""
    os.makedirs(DATA_DIR, exist_ok=True)
    with open(_tournament_file(slug), 'w', encoding='utf-8') as f:
        yaml.safe_dump(tournament.to_dict(), f, default_flow_style=False, sort_keys=False)


def tournament_payload(tournament: Tournament) -> dict:
    payload = {
        'name': tournament.name,
        'state': tournament.state,
        'participants': [s.to_dict() for s in tournament.participants],
        'champion': tournament.champion,
        'bracket': None,
    }
    if tournament.bracket:
        payload['bracket'] = get_bracket_display(tournament.bracket)
    return payload


def _error_response(error: Exception):
    if isinstance(error, TournamentNotFound):
        return jsonify({'error': f'Tournament {error} not found', 'kind': 'TournamentNotFound'}), 404
    if isinstance(error, MatchNotFound):
        status = 404
    elif isinstance(error, CONFLICT_ERRORS):
        status = 409
    elif isinstance(error, CorruptBracket):
        app.logger.error(f'Corrupt bracket: {error}')
        status = 500
    else:
        status = 400
    return jsonify({'error': str(error), 'kind': type(error).__name__}), status


def _store_error_response(slug: str, error: Exception):
    app.logger.error(f'Unreadable tournament file for {slug}: {error}')
    return jsonify({'error': f'Tournament {slug} could not be read', 'kind': 'StoreError'}), 500


def _read_tournament(slug: str):
    """Load a tournament for a read-only route; returns (tournament, error_response)."""
    try:
        return load_tournament(slug), None
    except (BracketError, TournamentNotFound) as e:
        return None, _error_response(e)
    except yaml.YAMLError as e:
        return None, _store_error_response(slug, e)


def _check_slug(slug: str):
    if not SLUG_PATTERN.match(slug):
        return jsonify({'error': 'Invalid tournament slug'}), 400
    return None


def _mutate(slug: str, action, create: bool = False):
    """Load, apply action, and save a tournament under its lock."""
    invalid = _check_slug(slug)
    if invalid:
        return invalid
    try:
        with _tournament_lock(slug):
            try:
                tournament = load_tournament(slug, create=create)
                action(tournament)
            except (BracketError, TournamentNotFound) as e:
                return _error_response(e)
            except yaml.YAMLError as e:
                return _store_error_response(slug, e)
            save_tournament(slug, tournament)
    except Timeout:
        app.logger.warning(f'Timed out waiting for the lock on {slug}')
        return jsonify({'error': f'Tournament {slug} is busy, try again', 'kind': 'Busy'}), 503
    return jsonify({'success': True, 'tournament': tournament_payload(tournament)})


@app.route('/api/game-modes')
def api_game_modes():
    modes = load_game_modes(GAME_MODES_FILE)
    return jsonify({key: mode.to_dict() for key, mode in modes.items()})


@app.route('/api/tournaments/<slug>')
def api_get_tournament(slug):
    invalid = _check_slug(slug)
    if invalid:
        return invalid
    tournament, error = _read_tournament(slug)
    if error:
        return error
    return jsonify(tournament_payload(tournament))


@app.route('/api/tournaments/<slug>/participants', methods=['POST'])
def api_set_participants(slug):
    """Replace the accepted participant list, creating the tournament if needed."""
    data = request.get_json(silent=True) or {}
    participants = data.get('participants')
    if not isinstance(participants, list):
        return jsonify({'error': 'participants must be a list'}), 400

    def action(tournament):
        if data.get('name'):
            tournament.name = data['name']
        tournament.set_participants(participants)

    return _mutate(slug, action, create=True)


@app.route('/api/tournaments/<slug>/seed', methods=['POST'])
def api_seed(slug):
    return _mutate(slug, lambda t: t.seed())


@app.route('/api/tournaments/<slug>/start', methods=['POST'])
def api_start(slug):
    return _mutate(slug, lambda t: t.start())


@app.route('/api/tournaments/<slug>/report', methods=['POST'])
def api_report_score(slug):
    """Report a match result: {match_id, top_score, bottom_score, game_mode}."""
    data = request.get_json(silent=True) or {}
    match_id = data.get('match_id')
    if match_id is None:
        return jsonify({'error': 'Missing match_id'}), 400
    try:
        match_id = int(match_id)
    except (TypeError, ValueError):
        return jsonify({'error': 'match_id must be a whole number'}), 400
    top_score = data.get('top_score')
    bottom_score = data.get('bottom_score')

    try:
        game_mode = get_game_mode(load_game_modes(GAME_MODES_FILE), data.get('game_mode'))
    except BracketError as e:
        return _error_response(e)

    def action(tournament):
        tournament.report_score(match_id, top_score, bottom_score, game_mode)
        app.logger.info(f'{slug}: match {match_id} reported {top_score}-{bottom_score}')

    return _mutate(slug, action)


@app.route('/api/tournaments/<slug>/finish', methods=['POST'])
def api_finish(slug):
    return _mutate(slug, lambda t: t.finish())


@app.route('/api/tournaments/<slug>/reset', methods=['POST'])
def api_reset(slug):
    return _mutate(slug, lambda t: t.reset())


@app.route('/api/tournaments/<slug>/champion')
def api_champion(slug):
    invalid = _check_slug(slug)
    if invalid:
        return invalid
    tournament, error = _read_tournament(slug)
    if error:
        return error
    return jsonify({'champion': get_champion(tournament.bracket)})


if __name__ == '__main__':
    app.run(debug=True)
