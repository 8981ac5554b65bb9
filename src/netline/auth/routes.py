"""
Authentication Routes - staff login

Flows:
1. Login: Username + Password (SYSTEM_ADMINISTRATOR accounts only)
2. Logout: Standard Flask-Login
"""

from flask import render_template, redirect, request, url_for, flash, current_app
from flask_login import current_user, login_user, logout_user, login_required
from urllib.parse import urlparse

from netline.auth import bp
from netline.auth.forms import LoginForm
from netline.auth.utils import authenticate


@bp.route("/")
def route_default():
    """Redirect root to login."""
    return redirect(url_for("auth_bp.login"))


@bp.route("/login", methods=["GET", "POST"])
def login():
    # Already logged in? Go to dashboard
    if current_user.is_authenticated:
        return redirect(url_for("main_bp.index"))

    form = LoginForm()

    if form.validate_on_submit():
        user = authenticate(form.username.data, form.password.data)

        if user is None:
            current_app.logger.info(f"Failed login for '{form.username.data}'")
            flash("Invalid credentials", "danger")
            return render_template("auth/login.html", form=form), 401

        login_user(user, remember=form.remember_me.data)
        flash(f"Welcome, {user.display_name}!", "success")

        next_page = request.args.get("next")
        if next_page and urlparse(next_page).netloc == "" and next_page.startswith("/"):
            return redirect(next_page)

        return redirect(url_for("main_bp.index"))

    return render_template("auth/login.html", form=form)


@bp.route("/logout")
@login_required
def logout():
    """Log out the current user."""
    name = current_user.display_name
    logout_user()
    flash(f"Goodbye, {name}!", "info")
    return redirect(url_for("auth_bp.login"))
