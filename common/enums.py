from django.db import models


class BaseEnum(models.TextChoices):
    @classmethod
    def has_value(cls, value):
        return value in cls.values


class Currency(BaseEnum):
    LOCAL = 'local', 'Local'
    USD = 'usd', 'USD'


class PaymentMethodType(BaseEnum):
    CASH_USD = 'cash_usd', 'Cash (USD)'
    CASH_LOCAL = 'cash_local', 'Cash (Local)'
    CARD_USD = 'card_usd', 'Card (USD)'
    CARD_LOCAL = 'card_local', 'Card (Local)'
    TRANSFER_USD = 'transfer_usd', 'Transfer (USD)'
    TRANSFER_LOCAL = 'transfer_local', 'Transfer (Local)'
    CRYPTO = 'crypto', 'Crypto'
    OTHER = 'other', 'Other'


class ActiveStatus(BaseEnum):
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'


class Gender(BaseEnum):
    MALE = 'male', 'Male'
    FEMALE = 'female', 'Female'
    OTHER = 'other', 'Other'


class MembershipStatus(BaseEnum):
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'
    EXPIRED = 'expired', 'Expired'
    SUSPENDED = 'suspended', 'Suspended'
    CANCELLED = 'cancelled', 'Cancelled'


class ClientMembershipState(BaseEnum):
    NO_MEMBERSHIP = 'no_membership', 'No membership'
    EXPIRED = 'expired', 'Expired'
    EXPIRING_SOON = 'expiring_soon', 'Expiring soon'
    ACTIVE = 'active', 'Active'


class RenewalBasis(BaseEnum):
    FROM_TODAY = 'from today', 'From today'
    FROM_EFFECTIVE_END_DATE = 'from current effective end date', 'From current effective end date'


class PayableKind(BaseEnum):
    MEMBERSHIP = 'membership', 'Membership'
    RENEWAL = 'membershiprenewal', 'Membership renewal'


class AttachmentType(BaseEnum):
    PROFILE_PHOTO = 'profile_photo', 'Profile photo'
    DOCUMENT = 'document', 'Document'
    GENERATED_DOCUMENT = 'generated_document', 'Generated document'
    CUSTOM_DOCUMENT = 'custom_document', 'Custom document'
    PAYMENT_EVIDENCE = 'payment_evidence', 'Payment evidence'
