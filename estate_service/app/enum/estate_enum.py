from enum import Enum


class LeaseStatus(str, Enum):
    active = "active"
    expiring_soon = "expiring_soon"
    expired = "expired"
    terminated = "terminated"


class ShopStatus(str, Enum):
    vacant = "vacant"
    occupied = "occupied"


class OwnershipType(str, Enum):
    sole = "sole"
    common = "common"


class ShopFloor(str, Enum):
    ground = "ground"
    first = "first"
    second = "second"
    subedari = "subedari"


class ExpenseType(str, Enum):
    guard = "guard"
    cleaner = "cleaner"
    electricity = "electricity"
    maintenance = "maintenance"
    other = "other"


class ExpenseAllocation(str, Enum):
    owner = "owner"
    common = "common"


class LedgerEntryType(str, Enum):
    opening = "opening"
    rent = "rent"
    payment = "payment"
    transfer_in = "transfer_in"
    transfer_out = "transfer_out"


class DeletionRecordType(str, Enum):
    payment = "payment"
    bank_deposit = "bank_deposit"
    expense = "expense"


# Leases whose balance may feed a settlement transfer
SETTLEMENT_SOURCE_STATUSES = (
    LeaseStatus.active,
    LeaseStatus.expiring_soon,
    LeaseStatus.expired,
    LeaseStatus.terminated,
)

# Leases counted as running for owner reports
RUNNING_LEASE_STATUSES = (LeaseStatus.active, LeaseStatus.expiring_soon)
