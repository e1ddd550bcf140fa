from threading import Thread

from flask import current_app
from flask_mail import Mail, Message

mail = Mail()


def send_async_email(app, msg):
    with app.app_context():
        try:
            mail.send(msg)
        except Exception as e:
            app.logger.error(f"Failed to send email: {e}")


def send_event_decision_email(user, event, approved: bool, notes=None, promoted=False):
    """Tell an event creator that their proposal was approved or rejected."""
    app = current_app._get_current_object()
    event_url = f"{app.config.get('CLIENT_URL')}/events/{event.id}"

    if approved:
        role_line = " You are now an organizer." if promoted else ""
        subject = f"Your event \"{event.title}\" was approved"
        body = (
            f"Hi {user.first_name},\n\n"
            f"Your event \"{event.title}\" has been approved and is now open for "
            f"registration.{role_line}\n\n"
            f"View it here: {event_url}\n"
        )
    else:
        subject = f"Your event \"{event.title}\" was rejected"
        body = (
            f"Hi {user.first_name},\n\n"
            f"Your event \"{event.title}\" was not approved.\n"
            f"Reason: {notes}\n\n"
            f"You can edit the proposal and submit it again.\n"
        )

    # If in testing mode, log the email instead of sending it
    if app.testing or not app.config.get("MAIL_SERVER"):
        app.logger.info("--- MOCK EMAIL ---")
        app.logger.info(f"To: {user.email}")
        app.logger.info(f"Subject: {subject}")
        app.logger.info(f"Body: {body}")
        app.logger.info("--- END MOCK EMAIL ---")
        return

    msg = Message(
        subject,
        sender=("UEMS", app.config.get("MAIL_USERNAME")),
        recipients=[user.email],
    )
    msg.body = body

    Thread(target=send_async_email, args=(app, msg)).start()
