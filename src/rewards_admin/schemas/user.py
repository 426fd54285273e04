from .common import (
    Checkbox,
    FormSchema,
    OptionalDateTime,
    OptionalEmail,
    OptionalText,
    required_ref,
    required_text,
)


class AppUserInput(FormSchema):
    organization_id: required_ref("Organization is required") = None
    first_name: OptionalText = None
    last_name: OptionalText = None
    email: OptionalEmail = None
    username: OptionalText = None
    password: OptionalText = None
    active: Checkbox = False


class AppUserOrganizationInput(FormSchema):
    app_user_id: required_ref("User is required") = None
    organization_id: required_ref("Organization is required") = None
    is_active: Checkbox = False


class UserPermissionInput(FormSchema):
    user_id: required_ref("User is required") = None
    branch_id: required_ref("Branch is required") = None
    action: required_text("Action is required") = ""
    assignment_date: OptionalDateTime = None


class CollaboratorPermissionInput(FormSchema):
    collaborator_id: required_ref("Collaborator is required") = None
    permission_type: required_text("Permission type is required") = ""
    can_execute: Checkbox = False


class RestrictedCollaboratorActionInput(FormSchema):
    action_name: required_text("Action name is required") = ""
    description: OptionalText = None
