class InternalURIs:
    API = "/api"
    CHAT = API + "/chat"
    CHAT_STATUS = CHAT + "/status"
    CHAT_PROVIDERS = CHAT + "/providers"
    CHAT_HEALTH = CHAT + "/health"
    DICTIONARY = API + "/dictionary"
    DICTIONARY_LLM_STATUS = DICTIONARY + "/config/llm-status"
    DICTIONARY_ENTRY = DICTIONARY + "/{entry_id}"


class EntryStatus:
    PUBLISHED = "published"
    ACTIVE = "active"
    UNDER_REVIEW = "under_review"
    ARCHIVED = "archived"


class VerificationPolicy:
    ACCURACY_THRESHOLD = 40
    # Tokens shorter than this never count toward the denominator.
    MIN_SIGNIFICANT_WORD_LENGTH = 3
    SENSE_SEPARATOR = ","
