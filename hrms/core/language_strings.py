"""Language Strings: localized error messages keyed by error code.

Invariants:
    - All strings are pure data (no IO, no computation beyond formatting)
    - Every locale in the Locale enum carries the same set of codes
    - Placeholders only name keys that the raising error puts in HrmsError.params
    - localize() never raises: unknown codes or missing params fall back to the
      message the error was raised with

Design Decisions:
    - Codes, not exception classes, key the catalog: one class (BusinessRuleError,
      ConflictError) raises many codes
    - Accept-Language is resolved per request in the error handlers; services stay
      locale-agnostic and raise English messages
"""

from hrms.core.domain_types import Locale


# --- Error messages ----------------------------------------------------------

MESSAGES: dict[Locale, dict[str, str]] = {
    Locale.EN: {
        "VALIDATION_ERROR": "Invalid value for '{field}'",
        "REQUEST_VALIDATION_ERROR": "Request validation failed",
        "AUTHENTICATION_REQUIRED": "Authentication required",
        "INSUFFICIENT_PERMISSIONS": "You are not allowed to {action} this {resource}",
        "CROSS_TENANT_ACCESS_DENIED": "This {resource} belongs to another tenant",
        "ROLE_ASSIGNMENT_DENIED": "You cannot assign a role above your own",
        "CANNOT_CHANGE_OWN_ROLE": "You cannot change your own role",
        "USER_RANK_DENIED": "You can only manage accounts ranked below your own",
        "PROFILE_FIELDS_RESTRICTED": (
            "Balances and status can only be set by someone ranked above the employee"
        ),
        "CANNOT_DEACTIVATE_SELF": "You cannot deactivate your own account",
        "TENANT_SUSPENDED": "Your tenant subscription is not active",
        "ORGANIZATION_INACTIVE": "Your organization is inactive",
        "QUOTA_EXCEEDED": "Limit reached for {quota} ({limit})",
        "RESOURCE_NOT_FOUND": "{resource_type} not found",
        "DUPLICATE_SLUG": "The slug '{slug}' is already in use",
        "DUPLICATE_EMAIL": "A user with this email already exists",
        "EMPLOYEE_PROFILE_EXISTS": "This user already has an employee profile",
        "MANAGER_CYCLE": "This manager assignment would create a reporting cycle",
        "NO_EMPLOYEE_PROFILE": "An employee profile is required for this action",
        "FEATURE_DISABLED": "The feature '{feature}' is disabled for this organization",
        "INSUFFICIENT_BALANCE": (
            "Insufficient {leave_type} balance: {available} days available, "
            "{requested} requested"
        ),
        "LEAVE_OVERLAP": "The requested dates overlap an existing leave request",
        "INVALID_LEAVE_TRANSITION": "A {current} request cannot become {target}",
        "LEAVE_ALREADY_STARTED": "Approved leave that has already started cannot be cancelled",
        "SELF_APPROVAL_FORBIDDEN": "You cannot approve or reject your own leave request",
        "TEMPLATE_INACTIVE": "This template is no longer active",
        "TEMPLATE_ALREADY_IMPORTED": "This template is already imported by the organization",
        "TEMPLATE_DETACHED": "This instance overrides its template and cannot be synced",
        "ASSESSMENT_INACTIVE": "This assessment is not active",
        "ATTEMPT_IN_PROGRESS": "You already have an attempt in progress for this assessment",
        "ATTEMPT_EXPIRED": "The time limit for this attempt has passed",
        "ATTEMPT_NOT_IN_PROGRESS": "This attempt is no longer in progress",
        "ANSWER_NOT_MANUAL": "This answer is scored automatically",
        "ATTEMPT_NOT_COMPLETED": "Only completed attempts can be evaluated",
        "SELF_EVALUATION_FORBIDDEN": "You cannot evaluate your own answers",
        "DATABASE_ERROR": "The database is temporarily unavailable",
        "INTERNAL_ERROR": "An unexpected error occurred",
    },
    Locale.IT: {
        "VALIDATION_ERROR": "Valore non valido per '{field}'",
        "REQUEST_VALIDATION_ERROR": "Validazione della richiesta non riuscita",
        "AUTHENTICATION_REQUIRED": "Autenticazione richiesta",
        "INSUFFICIENT_PERMISSIONS": "Non hai i permessi per {action} su {resource}",
        "CROSS_TENANT_ACCESS_DENIED": "Questa risorsa ({resource}) appartiene a un altro tenant",
        "ROLE_ASSIGNMENT_DENIED": "Non puoi assegnare un ruolo superiore al tuo",
        "CANNOT_CHANGE_OWN_ROLE": "Non puoi modificare il tuo ruolo",
        "USER_RANK_DENIED": "Puoi gestire solo account con un ruolo inferiore al tuo",
        "PROFILE_FIELDS_RESTRICTED": (
            "Saldi e stato possono essere modificati solo da un ruolo "
            "superiore a quello del dipendente"
        ),
        "CANNOT_DEACTIVATE_SELF": "Non puoi disattivare il tuo account",
        "TENANT_SUSPENDED": "L'abbonamento del tuo tenant non è attivo",
        "ORGANIZATION_INACTIVE": "La tua organizzazione non è attiva",
        "QUOTA_EXCEEDED": "Limite raggiunto per {quota} ({limit})",
        "RESOURCE_NOT_FOUND": "{resource_type} non trovato",
        "DUPLICATE_SLUG": "Lo slug '{slug}' è già in uso",
        "DUPLICATE_EMAIL": "Esiste già un utente con questa email",
        "EMPLOYEE_PROFILE_EXISTS": "Questo utente ha già un profilo dipendente",
        "MANAGER_CYCLE": "Questa assegnazione del responsabile creerebbe un ciclo gerarchico",
        "NO_EMPLOYEE_PROFILE": "Per questa azione è necessario un profilo dipendente",
        "FEATURE_DISABLED": "La funzionalità '{feature}' è disattivata per questa organizzazione",
        "INSUFFICIENT_BALANCE": (
            "Saldo {leave_type} insufficiente: {available} giorni disponibili, "
            "{requested} richiesti"
        ),
        "LEAVE_OVERLAP": "Le date richieste si sovrappongono a una richiesta esistente",
        "INVALID_LEAVE_TRANSITION": "Una richiesta {current} non può diventare {target}",
        "LEAVE_ALREADY_STARTED": "Un'assenza approvata già iniziata non può essere annullata",
        "SELF_APPROVAL_FORBIDDEN": "Non puoi approvare o rifiutare la tua richiesta di assenza",
        "TEMPLATE_INACTIVE": "Questo modello non è più attivo",
        "TEMPLATE_ALREADY_IMPORTED": "Questo modello è già stato importato dall'organizzazione",
        "TEMPLATE_DETACHED": "Questa istanza sovrascrive il modello e non può essere sincronizzata",
        "ASSESSMENT_INACTIVE": "Questa valutazione non è attiva",
        "ATTEMPT_IN_PROGRESS": "Hai già un tentativo in corso per questa valutazione",
        "ATTEMPT_EXPIRED": "Il tempo a disposizione per questo tentativo è scaduto",
        "ATTEMPT_NOT_IN_PROGRESS": "Questo tentativo non è più in corso",
        "ANSWER_NOT_MANUAL": "Questa risposta viene valutata automaticamente",
        "ATTEMPT_NOT_COMPLETED": "Solo i tentativi completati possono essere valutati",
        "SELF_EVALUATION_FORBIDDEN": "Non puoi valutare le tue risposte",
        "DATABASE_ERROR": "Il database non è momentaneamente disponibile",
        "INTERNAL_ERROR": "Si è verificato un errore imprevisto",
    },
}


# --- Locale resolution -------------------------------------------------------

def _supported(tag: str) -> Locale | None:
    primary = tag.strip().lower().split("-")[0].split("_")[0]
    for locale in Locale:
        if locale.value == primary:
            return locale
    return None


def _default_locale(default: str | Locale) -> Locale:
    if isinstance(default, Locale):
        return default
    return _supported(default) or Locale.EN


def resolve_locale(accept_language: str | None, default: str | Locale = Locale.EN) -> Locale:
    """First supported language of an Accept-Language header, by descending q."""
    if not accept_language:
        return _default_locale(default)

    weighted: list[tuple[float, int, str]] = []
    for position, part in enumerate(accept_language.split(",")):
        tag, _, params = part.strip().partition(";")
        if not tag:
            continue
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        if quality > 0:
            weighted.append((-quality, position, tag))

    for _, _, tag in sorted(weighted):
        locale = _supported(tag)
        if locale is not None:
            return locale
    return _default_locale(default)


# --- Formatting --------------------------------------------------------------

def localize(code: str, locale: Locale, fallback: str, **params) -> str:
    """Localized message for code, or fallback when unknown or unformattable."""
    template = MESSAGES.get(locale, {}).get(code)
    if template is None:
        return fallback
    try:
        return template.format(**params)
    except (KeyError, IndexError, ValueError):
        return fallback
