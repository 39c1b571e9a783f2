from flask import Blueprint, current_app, render_template, abort, request, redirect, url_for, flash, jsonify
from flask_login import login_required, current_user, login_user, logout_user
from forms import AdminLoginForm, RolloverPreviewForm, RolloverCommitForm
from models import Admin, SchoolClass, StudentProfile
from sqlalchemy import func
from utils.errors import InvalidThresholdError, PreviewComputationError
from utils.gateway import SqlAlchemyRosterGateway
from utils.rollover import RolloverEngine
from utils.serializers import serialize_class, serialize_commit_result, serialize_preview_item
from utils.token_utils import generate_preview_token, verify_preview_token

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

PREVIEW_FAILED_MESSAGE = "Could not compute the rollover preview. Please try again."
COMMIT_FAILED_MESSAGE = "The rollover could not be completed. Review the classes and run it again."


def admin_only():
    if getattr(current_user, 'role', None) != 'admin':
        abort(403)


def build_engine():
    return RolloverEngine.from_config(SqlAlchemyRosterGateway(), current_user.school_id, current_app.config)


def class_choices(school_id):
    classes = SchoolClass.query.filter_by(school_id=school_id).order_by(SchoolClass.grade_level, SchoolClass.section).all()
    return [(c.id, c.name) for c in classes]


@admin_bp.route('/login', methods=['GET', 'POST'])
def admin_login():
    form = AdminLoginForm()
    next_page = request.args.get('next')

    if form.validate_on_submit():
        username = form.username.data.strip()
        admin_id = form.user_id.data.strip()
        password = form.password.data.strip()

        admin = Admin.query.filter_by(admin_id=admin_id).first()

        if admin and admin.username.lower() == username.lower() and admin.check_password(password):
            login_user(admin)
            flash(f"Welcome back, Admin {admin.username}!", "success")
            return redirect(next_page or url_for("admin.dashboard"))

        flash("Invalid admin login credentials.", "danger")
        return render_template("admin/login.html", form=form), 401

    return render_template("admin/login.html", form=form)


@admin_bp.route('/logout')
@login_required
def admin_logout():
    logout_user()
    flash("You have been logged out.", "info")
    return redirect(url_for('admin.admin_login'))


#--------------- Admin Dashboard ---------------

@admin_bp.route('/dashboard')
@login_required
def dashboard():
    admin_only()

    counts = dict(
        StudentProfile.query
        .with_entities(StudentProfile.class_id, func.count(StudentProfile.id))
        .filter(StudentProfile.school_id == current_user.school_id)
        .group_by(StudentProfile.class_id)
        .all()
    )
    classes = SchoolClass.query.filter_by(school_id=current_user.school_id).order_by(SchoolClass.grade_level, SchoolClass.section).all()

    return render_template(
        'admin/dashboard.html',
        user=current_user,
        classes=classes,
        student_counts=counts,
        unassigned_count=counts.get(None, 0),
    )


#--------------- End of Year Rollover ---------------

@admin_bp.route('/rollover', methods=['GET'])
@login_required
def rollover():
    admin_only()
    form = RolloverPreviewForm(threshold=current_app.config['ROLLOVER_DEFAULT_THRESHOLD'])
    form.class_ids.choices = class_choices(current_user.school_id)
    return render_template('admin/rollover.html', form=form, commit_form=RolloverCommitForm())


@admin_bp.route('/rollover/preview', methods=['POST'])
@login_required
def rollover_preview():
    admin_only()
    form = RolloverPreviewForm()
    form.class_ids.choices = class_choices(current_user.school_id)
    if not form.validate_on_submit():
        return jsonify(success=False, errors=form.errors), 400

    engine = build_engine()
    try:
        items = engine.compute_preview(form.class_ids.data, form.threshold.data, highest_first=True)
    except InvalidThresholdError as e:
        return jsonify(success=False, errors={'threshold': [str(e)]}), 400
    except PreviewComputationError:
        current_app.logger.warning("Rollover preview failed for school %s", current_user.school_id)
        return jsonify(success=False, message=PREVIEW_FAILED_MESSAGE), 503

    token = generate_preview_token(current_user.school_id, items, form.threshold.data)
    return jsonify(
        success=True,
        threshold=form.threshold.data,
        items=[serialize_preview_item(i) for i in items],
        token=token,
    )


@admin_bp.route('/rollover/commit', methods=['POST'])
@login_required
def rollover_commit():
    admin_only()
    form = RolloverCommitForm()
    if not form.validate_on_submit():
        return jsonify(success=False, errors=form.errors), 400

    items = verify_preview_token(form.token.data, current_user.school_id)
    if items is None:
        return jsonify(success=False, message="This preview has expired. Run the preview again."), 400

    engine = build_engine()
    result = engine.commit(items)

    payload = serialize_commit_result(result)
    if not result.ok:
        current_app.logger.warning("Rollover stopped at class %s (%s)", result.failed_at, result.error)
        payload['message'] = COMMIT_FAILED_MESSAGE
        return jsonify(payload), 500

    payload['classes'] = [serialize_class(c) for c in engine.classes]
    return jsonify(payload)
