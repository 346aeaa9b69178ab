"""
Email and notification copy for project membership events.

Only display values go in here. The invitation token appears in exactly one
place, the accept link inside the invitation email.
"""

from html import escape
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import Notification


class EmailMessage(BaseModel):
    to: str
    subject: str
    html: str
    text: str


def invitation_email(
    to: str,
    inviter_name: str,
    project_name: str,
    user_type: str,
    invitation_url: str,
) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject=f"You've been invited to join {project_name}",
        html=(
            "<h1>Project Invitation</h1>"
            "<p>Hello,</p>"
            f"<p><strong>{escape(inviter_name)}</strong> has invited you to join the project "
            f"<strong>{escape(project_name)}</strong> as a <strong>{escape(user_type)}</strong>.</p>"
            "<p>Click the link below to accept the invitation:</p>"
            f'<p><a href="{escape(invitation_url)}">{escape(invitation_url)}</a></p>'
            "<p>This invitation will expire in 7 days.</p>"
            "<p>If you don't have an account, you'll be prompted to create one when you click the link.</p>"
        ),
        text=(
            "Project Invitation\n\n"
            "Hello,\n\n"
            f"{inviter_name} has invited you to join the project {project_name} as a {user_type}.\n\n"
            "Click the link below to accept the invitation:\n"
            f"{invitation_url}\n\n"
            "This invitation will expire in 7 days.\n\n"
            "If you don't have an account, you'll be prompted to create one when you click the link.\n"
        ),
    )


def invitation_notification(
    user_id: UUID, inviter_name: str, project_name: str, user_type: str
) -> Notification:
    return Notification(
        user_id=user_id,
        title=f"You've been invited to join {project_name}",
        subtitle=f"{inviter_name} has invited you as a {user_type}",
        detail=(
            "## Project Invitation\n\n"
            f"You have been invited to join the project **{project_name}** as a **{user_type}**.\n\n"
            "Check your email for the invitation link."
        ),
        link="/invitations/pending",
        read=False,
    )


def added_as_primary_client_notification(
    user_id: UUID, adder_name: str, project_id: UUID, project_name: str
) -> Notification:
    return Notification(
        user_id=user_id,
        title=f"You've been added to {project_name}",
        subtitle=f"{adder_name} has added you as a Client and set you as the primary client.",
        detail=(
            "## Added to Project\n\n"
            f"You have been added to the project **{project_name}** as a **Client** "
            "and set as the primary client.\n\n"
            "You can now access this project."
        ),
        link=f"/projects/{project_id}",
        read=False,
    )


def invitation_accepted_email(
    to: str,
    owner_name: str,
    accepted_name: str,
    project_name: str,
    user_type: str,
    project_users_url: str,
    already_member: bool,
) -> EmailMessage:
    note_html = ""
    note_text = ""
    if already_member:
        note_html = f"<p>Note: {escape(accepted_name)} is already a member of this project.</p>"
        note_text = f"Note: {accepted_name} is already a member of this project.\n\n"

    return EmailMessage(
        to=to,
        subject=f"{accepted_name} has accepted your invitation to {project_name}",
        html=(
            "<h1>Invitation Accepted</h1>"
            f"<p>Hello {escape(owner_name)},</p>"
            f"<p><strong>{escape(accepted_name)}</strong> has accepted your invitation to join the project "
            f"<strong>{escape(project_name)}</strong> as a <strong>{escape(user_type)}</strong>.</p>"
            f"{note_html}"
            "<p>You can view the project users here:</p>"
            f'<p><a href="{escape(project_users_url)}">{escape(project_users_url)}</a></p>'
        ),
        text=(
            "Invitation Accepted\n\n"
            f"Hello {owner_name},\n\n"
            f"{accepted_name} has accepted your invitation to join the project {project_name} "
            f"as a {user_type}.\n\n"
            f"{note_text}"
            "You can view the project users here:\n"
            f"{project_users_url}\n"
        ),
    )


def invitation_accepted_notification(
    owner_id: UUID,
    accepted_name: str,
    project_id: UUID,
    project_name: str,
    user_type: str,
    already_member: bool,
) -> Notification:
    if already_member:
        return Notification(
            user_id=owner_id,
            title=f"{accepted_name} accepted invitation to {project_name}",
            subtitle=f"{accepted_name} accepted your invitation as a {user_type} (already a member)",
            detail=(
                "## Invitation Accepted\n\n"
                f"**{accepted_name}** has accepted your invitation to join the project "
                f"**{project_name}** as a **{user_type}**.\n\n"
                "Note: They are already a member of this project."
            ),
            link=f"/projects/{project_id}/users",
            read=False,
        )

    return Notification(
        user_id=owner_id,
        title=f"{accepted_name} joined {project_name}",
        subtitle=f"{accepted_name} accepted your invitation as a {user_type}",
        detail=(
            "## User Joined Project\n\n"
            f"**{accepted_name}** has accepted your invitation to join the project "
            f"**{project_name}** as a **{user_type}**.\n\n"
            "They have been added to the project."
        ),
        link=f"/projects/{project_id}/users",
        read=False,
    )


def removed_from_project_email(
    to: str, removed_name: str, remover_name: str, project_name: str, user_type: str
) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject=f"You've been removed from {project_name}",
        html=(
            "<h1>Removed from Project</h1>"
            f"<p>Hello {escape(removed_name)},</p>"
            f"<p><strong>{escape(remover_name)}</strong> has removed you from the project "
            f"<strong>{escape(project_name)}</strong>.</p>"
            f"<p>You were previously a <strong>{escape(user_type)}</strong> on this project.</p>"
            "<p>If you believe this was done in error, please contact the project owner.</p>"
        ),
        text=(
            "Removed from Project\n\n"
            f"Hello {removed_name},\n\n"
            f"{remover_name} has removed you from the project {project_name}.\n\n"
            f"You were previously a {user_type} on this project.\n\n"
            "If you believe this was done in error, please contact the project owner.\n"
        ),
    )


def removed_from_project_notification(
    user_id: UUID, remover_name: str, project_name: str, user_type: str
) -> Notification:
    return Notification(
        user_id=user_id,
        title=f"Removed from {project_name}",
        subtitle=f"{remover_name} removed you from the project",
        detail=(
            "## Removed from Project\n\n"
            f"**{remover_name}** has removed you from the project **{project_name}**.\n\n"
            f"You were previously a **{user_type}** on this project.\n\n"
            "If you believe this was done in error, please contact the project owner."
        ),
        link="/projects",
        read=False,
    )
