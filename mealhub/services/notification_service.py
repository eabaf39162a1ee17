from mealhub.extensions import db
from mealhub.models.notification import Notification

def get_user_notifications(user_id, is_read=None):
    q = Notification.query.filter_by(user_id=user_id)
    if is_read is not None:
        q = q.filter_by(is_read=is_read)
    return q.order_by(Notification.created_at.desc())

def mark_notification_read(notification):
    notification.is_read = True
    db.session.commit()
    return notification

def mark_all_read_for_user(user_id):
    updated = Notification.query.filter_by(user_id=user_id, is_read=False).update({"is_read": True})
    db.session.commit()
    return updated

def send_notification_to_user(
    user_id: str,
    title: str,
    message: str,
    notif_type="info",
    details=None,
    sender_id=None
):
    notif = Notification(
        sender_id=sender_id,
        user_id=user_id,
        type=notif_type,
        title=title,
        message=message,
        details=details,
    )
    db.session.add(notif)
    db.session.commit()
    return notif
