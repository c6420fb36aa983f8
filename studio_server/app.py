"""HTTP API for the bridge decision engine and the data assistant.

  POST /api/bridge/bid        body: BiddingContext JSON (+ optional game_id)
                              returns: {success, bid, source}
  POST /api/bridge/play       body: PlayContext JSON (+ optional game_id)
                              returns: {success, card: {rank, suit}, source}
  POST /api/assistant/execute body: {prompt, data_sources}
                              returns: {success, result}
  POST /api/assistant/csv     body: {content}
                              returns: {rows}
"""
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from .assistant import DataAssistant, parse_csv
from .decision_logger import DecisionLogger
from .engine import DecisionEngine
from .errors import AssistantNotConfiguredError, InvalidContextError, RemoteDecisionError
from .models import BiddingContext, PlayContext

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)


def get_engine() -> DecisionEngine:
    """The app's decision engine, built from the environment on first use."""
    if app.config.get('DECISION_ENGINE') is None:
        app.config['DECISION_ENGINE'] = DecisionEngine.from_config()
    return app.config['DECISION_ENGINE']


def get_assistant() -> DataAssistant:
    """The app's data assistant, built from the environment on first use."""
    if app.config.get('DATA_ASSISTANT') is None:
        app.config['DATA_ASSISTANT'] = DataAssistant.from_config()
    return app.config['DATA_ASSISTANT']


def _decision_log(data):
    game_id = data.get('game_id') if isinstance(data, dict) else None
    if not game_id:
        return None
    return DecisionLogger(game_id, logs_dir=app.config.get('LOGS_DIR'))


@app.route('/api/health')
def health():
    return {'status': 'ok'}


# Bridge API

@app.route('/api/bridge/status')
def bridge_status():
    """Whether bids and cards are asked to the remote model."""
    return jsonify({'remote': get_engine().is_remote_configured})


@app.route('/api/bridge/bid', methods=['POST'])
def decide_bid():
    """Choose the next bid for the seat in the posted context."""
    data = request.get_json(silent=True)

    try:
        context = BiddingContext.from_dict(data)
        decision = get_engine().advise_bid(context, _decision_log(data))
        return jsonify({
            'success': True,
            'bid': decision.value,
            'source': decision.source,
        })
    except InvalidContextError as e:
        return jsonify({'error': str(e)}), 400


@app.route('/api/bridge/play', methods=['POST'])
def decide_play():
    """Choose the card to play for the seat in the posted context."""
    data = request.get_json(silent=True)

    try:
        context = PlayContext.from_dict(data)
        decision = get_engine().advise_play(context, _decision_log(data))
        return jsonify({
            'success': True,
            'card': decision.value.to_dict(),
            'source': decision.source,
        })
    except InvalidContextError as e:
        return jsonify({'error': str(e)}), 400


# Data assistant API

@app.route('/api/assistant/status')
def assistant_status():
    return jsonify({'configured': get_assistant().is_configured})


@app.route('/api/assistant/execute', methods=['POST'])
def assistant_execute():
    """Run a calculation prompt over the posted data sources."""
    data = request.get_json(silent=True) or {}
    prompt = data.get('prompt')
    data_sources = data.get('data_sources') or []

    if not prompt:
        return jsonify({'error': 'prompt is required'}), 400
    if not isinstance(data_sources, list) or not all(isinstance(s, dict) for s in data_sources):
        return jsonify({'error': 'data_sources must be a list of objects'}), 400

    try:
        result = get_assistant().execute_prompt(prompt, data_sources)
        return jsonify({'success': True, 'result': result})
    except AssistantNotConfiguredError as e:
        return jsonify({'error': str(e)}), 503
    except RemoteDecisionError as e:
        logger.error("Assistant request failed: %s", e)
        return jsonify({'error': str(e)}), 502


@app.route('/api/assistant/csv', methods=['POST'])
def assistant_csv():
    """Parse posted CSV text into row objects."""
    data = request.get_json(silent=True) or {}
    content = data.get('content')
    if not isinstance(content, str):
        return jsonify({'error': 'content must be a string'}), 400
    return jsonify({'rows': parse_csv(content)})
