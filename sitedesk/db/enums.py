from enum import Enum


class CampaignTypeEnum(str, Enum):
    MAX_TOTAL = "MAX_TOTAL"
    DATE_VALIDITY = "DATE_VALIDITY"
    BOTH = "BOTH"
