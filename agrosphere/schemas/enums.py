from enum import Enum

class ConnectionStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"

class RequestDirection(str, Enum):
    sent = "sent"
    received = "received"

class RecordType(str, Enum):
    expense = "expense"
    earning = "earning"

class ExpenseCategory(str, Enum):
    seeds = "seeds"
    fertilizer = "fertilizer"
    pesticides = "pesticides"
    equipment = "equipment"
    labor = "labor"
    irrigation = "irrigation"
    fuel = "fuel"
    transport = "transport"
    livestock_feed = "livestock_feed"
    maintenance = "maintenance"
    other = "other"

class EarningCategory(str, Enum):
    crop_sales = "crop_sales"
    livestock_sales = "livestock_sales"
    dairy = "dairy"
    subsidy = "subsidy"
    rental = "rental"
    services = "services"
    other = "other"

CATEGORIES_BY_TYPE = {
    RecordType.expense: {c.value for c in ExpenseCategory},
    RecordType.earning: {c.value for c in EarningCategory},
}

class NotificationKind(str, Enum):
    connection_request = "connection_request"
    connection_accepted = "connection_accepted"
