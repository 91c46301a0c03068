"""
Table Service Requests - Main Application
Customers request service from a table QR code, staff work the live dashboard
"""

from flask import Flask, request, jsonify, send_from_directory
from flask_socketio import SocketIO
from flask_cors import CORS
from models import db, Restaurant, Table, ServiceRequest
from dashboard import get_dashboard
from cooldowns import CooldownTracker
from qr_codes import table_qr_entries, DEFAULT_QR_SIZE
from request_types import REQUEST_OPTIONS, STATUSES
from submission import submit_request, SubmissionError, CooldownActive, MESSAGE_DISMISS_SECONDS
import logging
import os
import threading

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'your-secret-key-change-this')
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///requests.db')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['UPLOAD_FOLDER'] = os.environ.get('UPLOAD_FOLDER', os.path.join(app.root_path, 'uploads'))
app.config['PUBLIC_BASE_URL'] = os.environ.get('PUBLIC_BASE_URL')
app.config['STAFF_REFRESH_SECONDS'] = float(os.environ.get('STAFF_REFRESH_SECONDS', 3))
app.config['MAX_CONTENT_LENGTH'] = 10 * 1024 * 1024

# Initialize extensions
db.init_app(app)
socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')
CORS(app)

STAFF_NAMESPACE = '/staff'

# Create tables
with app.app_context():
    db.create_all()

# Staff poller state
staff_clients = 0
poller_lock = threading.Lock()
poller_started = False

# Helper functions
def resolve_table(restaurant_slug, table_label):
    """Restaurant and table for a customer URL, (None, None) when either is missing"""
    restaurant = Restaurant.query.filter_by(slug=restaurant_slug).first()
    if not restaurant:
        return None, None

    table = Table.query.filter_by(restaurant_id=restaurant.id, label=table_label).first()
    if not table:
        return None, None

    return restaurant, table

def not_found_response():
    return jsonify({'success': False, 'not_found': True, 'error': 'Table not found'}), 404

def error_response(message, status_code):
    return jsonify({
        'success': False,
        'error': message,
        'dismiss_after': MESSAGE_DISMISS_SECONDS
    }), status_code

def public_base_url():
    return app.config['PUBLIC_BASE_URL'] or request.host_url

def json_body():
    """Request JSON object, {} for a missing, malformed or non-object body"""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}

def broadcast_dashboard():
    """Push a fresh snapshot to connected staff screens; failures are only logged"""
    try:
        socketio.emit('dashboard_update', get_dashboard(), namespace=STAFF_NAMESPACE)
        return True
    except Exception:
        db.session.rollback()
        logger.exception("Error broadcasting dashboard data")
        return False

def poll_dashboard():
    """One poller pass - broadcast only while staff are connected"""
    if not staff_clients:
        return False
    with app.app_context():
        try:
            return broadcast_dashboard()
        finally:
            db.session.remove()

def dashboard_poller():
    """Re-read tables and requests every few seconds while staff are watching"""
    while True:
        socketio.sleep(app.config['STAFF_REFRESH_SECONDS'])
        poll_dashboard()

@socketio.on('connect', namespace=STAFF_NAMESPACE)
def staff_connect():
    global staff_clients, poller_started
    with poller_lock:
        staff_clients += 1
        if not poller_started:
            socketio.start_background_task(dashboard_poller)
            poller_started = True

@socketio.on('disconnect', namespace=STAFF_NAMESPACE)
def staff_disconnect(*args):
    global staff_clients
    with poller_lock:
        staff_clients = max(staff_clients - 1, 0)

# Customer routes
@app.route('/u/<restaurant_slug>/<table_label>')
def table_page(restaurant_slug, table_label):
    """Table page - request buttons and their cooldowns"""
    try:
        restaurant, table = resolve_table(restaurant_slug, table_label)
        if not table:
            return not_found_response()

        tracker = CooldownTracker(table.id).load()

        return jsonify({
            'success': True,
            'restaurant': restaurant.to_dict(),
            'table': table.to_dict(),
            'options': REQUEST_OPTIONS,
            'cooldowns': tracker.to_dict()
        })

    except Exception as e:
        logger.exception("Error loading table %s/%s", restaurant_slug, table_label)
        return error_response(f'Error: {e}', 500)

@app.route('/api/u/<restaurant_slug>/<table_label>/cooldowns')
def table_cooldowns_api(restaurant_slug, table_label):
    """Current cooldown countdowns for a table"""
    try:
        restaurant, table = resolve_table(restaurant_slug, table_label)
        if not table:
            return not_found_response()

        tracker = CooldownTracker(table.id).load()
        return jsonify({'success': True, 'cooldowns': tracker.to_dict()})

    except Exception as e:
        logger.exception("Error checking cooldowns for %s/%s", restaurant_slug, table_label)
        return error_response(str(e), 500)

@app.route('/api/u/<restaurant_slug>/<table_label>/requests', methods=['POST'])
def submit_request_api(restaurant_slug, table_label):
    """Create a request; accepts JSON or multipart with a 'photo' file"""
    request_type = None
    try:
        restaurant, table = resolve_table(restaurant_slug, table_label)
        if not table:
            return not_found_response()

        if request.is_json:
            request_type = json_body().get('type')
        else:
            request_type = request.form.get('type')

        if not request_type:
            return error_response('Request type required', 400)

        service_request, tracker = submit_request(table, request_type, photo=request.files.get('photo'))

        broadcast_dashboard()

        return jsonify({
            'success': True,
            'message': '✅ Request sent! Staff will be with you shortly.',
            'dismiss_after': MESSAGE_DISMISS_SECONDS,
            'request': service_request.to_dict(),
            'cooldowns': tracker.to_dict()
        }), 201

    except CooldownActive as e:
        return jsonify({
            'success': False,
            'error': str(e),
            'dismiss_after': MESSAGE_DISMISS_SECONDS,
            'time_left': e.time_left,
            'until': e.until.isoformat()
        }), e.status_code

    except SubmissionError as e:
        return error_response(str(e), e.status_code)

    except Exception as e:
        db.session.rollback()
        logger.exception("Error submitting %s request for %s/%s", request_type, restaurant_slug, table_label)
        return error_response(f'❌ {e}', 500)

@app.route('/photos/<path:filename>')
def serve_photo(filename):
    """Uploaded request photos"""
    response = send_from_directory(app.config['UPLOAD_FOLDER'], filename)
    response.headers['X-Content-Type-Options'] = 'nosniff'
    return response

# Staff routes
@app.route('/api/staff/dashboard')
def staff_dashboard_api():
    """Requests, floor plan and counters for the staff view"""
    try:
        status = request.args.get('status', 'all')
        table_id = request.args.get('table_id', type=int)

        if status != 'all' and status not in STATUSES:
            return jsonify({'success': False, 'error': f'Invalid status: {status}'}), 400

        return jsonify({'success': True, **get_dashboard(status, table_id)})

    except Exception as e:
        logger.exception("Error fetching dashboard data")
        return jsonify({'success': False, 'error': str(e)}), 500

@app.route('/api/staff/requests/<int:request_id>/status', methods=['POST'])
def update_request_status_api(request_id):
    """Move a request to another status"""
    try:
        new_status = json_body().get('status')

        if new_status not in STATUSES:
            return jsonify({'success': False, 'error': f'Invalid status: {new_status}'}), 400

        service_request = db.session.get(ServiceRequest, request_id)
        if not service_request:
            return jsonify({'success': False, 'error': 'Request not found'}), 404

        service_request.status = new_status
        db.session.commit()

        broadcast_dashboard()

        return jsonify({'success': True, 'request': service_request.to_dict()})

    except Exception as e:
        db.session.rollback()
        logger.exception("Error updating request %s", request_id)
        return jsonify({'success': False, 'error': str(e)}), 500

@app.route('/api/staff/reset-requests', methods=['POST'])
def reset_requests_api():
    """Delete every request - needs {"confirm": true}"""
    try:
        payload = json_body()
        if payload.get('confirm') is not True:
            return jsonify({'success': False, 'error': 'Confirmation required to delete all requests'}), 400

        deleted = ServiceRequest.query.delete()
        db.session.commit()

        logger.warning("Deleted all %s requests", deleted)

        broadcast_dashboard()

        return jsonify({
            'success': True,
            'deleted': deleted,
            'message': '✅ All requests cleared successfully!'
        })

    except Exception as e:
        db.session.rollback()
        logger.exception("Error resetting requests")
        return jsonify({'success': False, 'error': '❌ Error clearing requests. Please try again.'}), 500

# QR generator routes
@app.route('/api/qr/restaurants')
def qr_restaurants_api():
    """Restaurants to generate QR codes for"""
    try:
        restaurants = Restaurant.query.order_by(Restaurant.name).all()
        return jsonify({'success': True, 'restaurants': [r.to_dict() for r in restaurants]})
    except Exception as e:
        logger.exception("Error fetching restaurants")
        return jsonify({'success': False, 'error': str(e)}), 500

@app.route('/api/qr/restaurants/<int:restaurant_id>/tables')
def qr_tables_api(restaurant_id):
    """Printable QR codes for a restaurant's tables, optionally a selection of them"""
    try:
        restaurant = db.session.get(Restaurant, restaurant_id)
        if not restaurant:
            return jsonify({'success': False, 'error': 'Restaurant not found'}), 404

        query = Table.query.filter_by(restaurant_id=restaurant.id)

        selected = request.args.get('table_ids')
        if selected:
            table_ids = [int(table_id) for table_id in selected.split(',') if table_id.strip()]
            query = query.filter(Table.id.in_(table_ids))

        tables = query.order_by(Table.label).all()
        size = request.args.get('size', DEFAULT_QR_SIZE, type=int)

        return jsonify({
            'success': True,
            'restaurant': restaurant.to_dict(),
            'qr_codes': table_qr_entries(public_base_url(), restaurant, tables, size)
        })

    except ValueError:
        return jsonify({'success': False, 'error': 'Invalid table selection'}), 400
    except Exception as e:
        logger.exception("Error fetching tables for restaurant %s", restaurant_id)
        return jsonify({'success': False, 'error': str(e)}), 500

if __name__ == '__main__':
    logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO'),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    socketio.run(app, debug=True, host='0.0.0.0', port=5000)
