from flask import Blueprint, current_app, render_template, request, redirect, url_for, session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth import login_required, guest_only
from errors import EmailAlreadyUsed, InvalidCredentials, PredictionServiceError
from extensions import db
from models import User, Report
from prediction_client import PREDICTION_MODES
from security import hash_password, verify_password

main = Blueprint('main', __name__)


def start_session(user):
    session.clear()
    session['user_id'] = user.id
    session['user_name'] = user.name
    # New id on every login, the pre-login one is dropped from the store
    current_app.session_interface.regenerate(session)


@main.route('/')
def index():
    """Landing page"""
    return render_template('landing.html')


@main.route('/signup', methods=['GET', 'POST'])
@guest_only
def signup():
    if request.method == 'GET':
        return render_template('auth/signup.html', error=None)

    name = request.form.get('name', '').strip()
    email = request.form.get('email', '').strip().lower()
    password = request.form.get('password', '')

    if not name or not email or not password:
        return render_template('auth/signup.html', error='Please fill in all fields.')

    try:
        if User.query.filter_by(email=email).first():
            raise EmailAlreadyUsed()

        user = User(name=name, email=email, password_hash=hash_password(password))
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            db.session.rollback()
            raise EmailAlreadyUsed()
    except EmailAlreadyUsed as e:
        current_app.logger.info(f"Signup rejected, email already on file: {email}")
        return render_template('auth/signup.html', error=e.message)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error creating user {email}: {e}")
        return render_template('auth/signup.html', error='Signup failed.')

    start_session(user)
    current_app.logger.info(f"User {user.id} signed up")
    return redirect(url_for('main.dashboard'))


@main.route('/login', methods=['GET', 'POST'])
@guest_only
def login():
    if request.method == 'GET':
        return render_template('auth/login.html', error=None)

    email = request.form.get('email', '').strip().lower()
    password = request.form.get('password', '')

    try:
        user = User.query.filter_by(email=email).first()
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentials()
    except InvalidCredentials as e:
        current_app.logger.info(f"Failed login for {email}")
        return render_template('auth/login.html', error=e.message)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Login lookup failed for {email}: {e}")
        return render_template('auth/login.html', error='Login failed.')

    start_session(user)
    current_app.logger.info(f"User {user.id} logged in")
    return redirect(url_for('main.dashboard'))


@main.route('/logout')
@login_required
def logout():
    """User logout"""
    user_id = session.get('user_id')
    session.clear()
    current_app.logger.info(f"User {user_id} logged out")
    return redirect(url_for('main.index'))


@main.route('/dashboard')
@login_required
def dashboard():
    """User dashboard showing full prediction history"""
    user_id = session['user_id']
    try:
        reports = Report.for_user(user_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Dashboard error for user {user_id}: {e}")
        return render_template('dashboard.html', reports=[], error='Error loading reports. Please try again.')

    current_app.logger.info(f"Dashboard loaded for user {user_id} with {len(reports)} reports")
    return render_template('dashboard.html', reports=reports, error=None)


@main.route('/expert', methods=['GET', 'POST'])
@login_required
def expert():
    if request.method == 'GET':
        return render_template('expert.html')
    return run_prediction('expert')


@main.route('/basic', methods=['GET', 'POST'])
@login_required
def basic():
    if request.method == 'GET':
        return render_template('basic.html')
    return run_prediction('basic')


def run_prediction(mode_name):
    """Send the submitted form to the prediction service, store and render the result"""
    mode = PREDICTION_MODES[mode_name]
    payload = request.form.to_dict()
    client = current_app.extensions['prediction_client']

    try:
        result = client.predict(mode_name, payload)

        report = Report(
            user_id=session['user_id'],
            city=payload.get(mode.location_field),
            mode=mode_name,
            input=payload,
            output=result,
        )
        db.session.add(report)
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PredictionServiceError(mode_name, f"report not saved: {e}") from e
    except PredictionServiceError as e:
        current_app.logger.error(f"{mode_name} prediction failed for user {session['user_id']}: {e.reason}")
        return e.message, e.status_code, {'Content-Type': 'text/plain; charset=utf-8'}

    current_app.logger.info(f"Report {report.id} saved for user {report.user_id} ({mode_name})")
    return render_template(
        'result.html',
        mode=mode_name,
        fields=payload,
        prediction=result['prediction'],
        confidence=result['confidence'],
        message=result['message'],
        **mode.display
    )
