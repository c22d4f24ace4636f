"""User-facing error messages shared by every API route.

Internal error details are logged; clients only ever see these strings.
"""

# General
UNAUTHORIZED = "Sign in to continue."
ADMIN_REQUIRED = "Administrator access is required."

# Users
USER_NOT_FOUND = "User not found."
USER_DELETE_FORBIDDEN = "You can only delete your own account."
USER_DELETE_FAILED = "Failed to delete the account."
USER_WITHDRAW_FORBIDDEN = "You can only withdraw your own account."
USER_WITHDRAWAL_FAILED = "Failed to withdraw the account."
USER_ALREADY_WITHDRAWN = "This account has already been withdrawn."
USER_WITHDRAWN = "Your account has been withdrawn."
WITHDRAWAL_REASON_REQUIRED = "Please tell us why you are leaving."
USER_REACTIVATE_FORBIDDEN = "You can only restore your own account."
USER_NOT_WITHDRAWN = "This account has not been withdrawn."
USER_REACTIVATION_EXPIRED = (
    "The account can no longer be restored ({days} days since withdrawal)."
)
USER_REACTIVATED = "Your account has been restored. Please set up your profile again."
USER_REACTIVATION_FAILED = "Failed to restore the account."

# Projects
PROJECT_NOT_FOUND = "Project not found."
PROJECT_DELETE_FORBIDDEN = "You do not have permission to delete this project."
PROJECT_DELETE_FAILED = "Failed to delete the project."

# Digests
DIGEST_NOT_FOUND = "Digest not found."
DIGEST_DELETED = "The digest has been deleted."
DIGEST_DEACTIVATED = "The digest has been deactivated."
DIGEST_DELETE_FAILED = "Failed to delete the digest."

# Partial completion
PARTIAL_DELETE = "Some data could not be removed. Please try again."
