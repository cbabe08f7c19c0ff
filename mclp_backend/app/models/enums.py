"""
Enumerations shared by models and schemas.

Values are the exact strings stored in the database and exchanged with
the frontend.
"""

import enum


class LedgerCategory(str, enum.Enum):
    """Ledger entry category."""
    REVENUE = "Revenue"
    EXPENSES = "Expenses"
    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    CAPITAL = "Capital"
    INVESTMENTS = "Investments"
    OPERATIONAL = "Operational"
    ADMINISTRATIVE = "Administrative"


class PaymentType(str, enum.Enum):
    """How a ledger entry was paid."""
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"
    CHEQUE = "Cheque"
    ONLINE_PAYMENT = "Online Payment"
    CREDIT_CARD = "Credit Card"
    OTHER = "Other"


class FileCategory(str, enum.Enum):
    """Land file category."""
    REGULAR = "Regular"
    UNAPPROVED = "Unapproved"
    LAND_USE = "Land Use"
    MISC = "Misc"
    SINGLE_PLOT = "Single Plot"
    RERA = "RERA"


class ExtentUnit(str, enum.Enum):
    """Unit of the land extent."""
    ACRES = "Acres"
    HECTARES = "Hectares"
    SQ_FT = "Sq.Ft"
    SQ_YARDS = "Sq.Yards"
    CENTS = "Cents"


class ProjectStatus(str, enum.Enum):
    """
    Project status of a land file.

    Status label only: any status can be set from any other.
    New files always start as NEW.
    """
    NEW = "new"
    HANDLING = "handling"
    HOLD = "hold"
    COMPLETED = "completed"


# Sub-status enumerations used while a project is handled.
# The empty string means "unset".

class FileStatus(str, enum.Enum):
    UNSET = ""
    IN_PROGRESS = "In Progress"
    DTCP_IN_PROGRESS = "DTCP In Progress"
    CLIENT_IN_PROGRESS = "Client In Progress"
    DOCUMENTATION = "Documentation"
    APPROVAL_PENDING = "Approval Pending"


class DwgStatus(str, enum.Enum):
    UNSET = ""
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    UNDER_REVIEW = "Under Review"
    APPROVED = "Approved"


class FormsStatus(str, enum.Enum):
    UNSET = ""
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    PARTIALLY_COMPLETED = "Partially Completed"
    COMPLETED = "Completed"
    SUBMITTED = "Submitted"
    APPROVED = "Approved"


class OnlineStatus(str, enum.Enum):
    UNSET = ""
    NOT_STARTED = "Not Started"
    PREPARING_DOCUMENTS = "Preparing Documents"
    READY_TO_UPLOAD = "Ready to Upload"
    UPLOADING = "Uploading"
    UPLOADED = "Uploaded"
    UNDER_VERIFICATION = "Under Verification"
    VERIFIED = "Verified"


class DocumentCategory(str, enum.Enum):
    """Document library section."""
    COMPANY = "company"
    GOVT_GOS = "govt-gos"
    GOVT_DOCS = "govt-docs"
    TEMPLATES = "templates"


def enum_values(enum_cls):
    """Store the enum value (not the member name) in the database."""
    return [member.value for member in enum_cls]
