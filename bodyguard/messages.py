"""Canonical message texts and their bundled translations.

Every message the engine or a built-in constraint can produce is declared
here in its canonical English form. The canonical text doubles as the
lookup key into the translation tables, so an untranslated message simply
renders as English.

Format strings use positional placeholders (``{0}``, ``{1}``, ...) so that a
translation may reorder its arguments.
"""

from typing import Dict

# Structural (document-level) messages
MSG_UNABLE_TO_DECODE = "Unable to decode as JSON"
MSG_NOT_JSON_NULL = "JSON must not be JSON null"
MSG_NOT_JSON_ARRAY = "JSON must not be JSON array"
MSG_NOT_JSON_OBJECT = "JSON must not be JSON object"
MSG_EXPECTED_JSON_ARRAY = "JSON expected to be JSON array"
MSG_EXPECTED_JSON_OBJECT = "JSON expected to be JSON object"

# Property and value messages
MSG_ARRAY_ELEMENT_MUST_BE_OBJECT = "JSON array element must be an object"
MSG_ARRAY_ELEMENT_MUST_NOT_BE_NULL = "JSON array element must not be null"
MSG_MISSING_PROPERTY = "Missing property"
MSG_UNWANTED_PROPERTY = "Property must not be present"
MSG_UNKNOWN_PROPERTY = "Unknown property"
MSG_INVALID_PROPERTY_NAME = "Invalid property name"
MSG_PROPERTY_VALUE_MUST_BE_OBJECT = "Property value must be an object"
MSG_PROPERTY_REQUIRED_WHEN = "Property is required under certain criteria"
MSG_PROPERTY_UNWANTED_WHEN = "Property must not be present under certain conditions"
MSG_VALUE_CANNOT_BE_NULL = "Value cannot be null"
MSG_VALUE_MUST_BE_OBJECT = "Value must be an object"
MSG_VALUE_MUST_BE_ARRAY = "Value must be an array"
MSG_VALUE_MUST_BE_OBJECT_OR_ARRAY = "Value must be an object or array"
MSG_PROPERTY_OBJECT_VALIDATOR_ERROR = "Object validator error - does not allow object or array!"
MSG_FAILURE = "Validation failed"

# Built-in constraint messages
MSG_NOT_EMPTY_STRING = "String value must not be an empty string"
MSG_NOT_BLANK_STRING = "String value must not be a blank string"
MSG_VALID_PATTERN = "String value must have valid pattern"
MSG_VALID_UUID = "Value must be a valid UUID"
MSG_POSITIVE = "Value must be positive"
MSG_POSITIVE_OR_ZERO = "Value must be positive or zero"
MSG_ARRAY_UNIQUE = "Array elements must be unique"
MSG_VALID_ISO_DATE = "Value must be a valid date string (format: YYYY-MM-DD)"
MSG_VALID_ISO_DATETIME = "Value must be a valid date/time string (format: YYYY-MM-DDThh:mm:ss.sss[Z|+-hh:mm])"
MSG_VALID_ISO_DATETIME_NO_OFFSET = "Value must be a valid date/time string (format: YYYY-MM-DDThh:mm:ss.sss)"
MSG_VALID_ISO_DATETIME_NO_MILLIS = "Value must be a valid date/time string (format: YYYY-MM-DDThh:mm:ss[Z|+-hh:mm])"
MSG_VALID_ISO_DATETIME_MIN = "Value must be a valid date/time string (format: YYYY-MM-DDThh:mm:ss)"
MSG_DATETIME_FUTURE = "Value must be a valid date/time in the future"
MSG_DATETIME_PAST = "Value must be a valid date/time in the past"

# Formats
FMT_VALUE_EXPECTED_TYPE = "Value expected to be of type {0}"
FMT_CONSTRAINT_SET_ALL_OF = "Constraint set must pass all of {0} undisclosed validations"
FMT_CONSTRAINT_SET_ONE_OF = "Constraint set must pass one of {0} undisclosed validations"
FMT_STRING_MIN_LEN = "String value length must be at least {0} characters"
FMT_STRING_MAX_LEN = "String value length must not exceed {0} characters"
FMT_STRING_MIN_MAX_LEN = "String value length must be between {0} ({1}) and {2} ({3})"
FMT_VALID_TOKEN = "String value must be valid token - {0}"
FMT_UUID_CORRECT_VERSION = "Value must be a valid UUID (version {0})"
FMT_GTE = "Value must be greater than or equal to {0}"
FMT_GT = "Value must be greater than {0}"
FMT_LTE = "Value must be less than or equal to {0}"
FMT_LT = "Value must be less than {0}"
FMT_RANGE = "Value must be between {0} ({1}) and {2} ({3})"
FMT_MIN_MAX_LEN = "Value length must be between {0} ({1}) and {2} ({3})"
FMT_EQUALS_OTHER = "Value must equal the value of property '{0}'"

# Tokens
TOKEN_INCLUSIVE = "inclusive"
TOKEN_EXCLUSIVE = "exclusive"

LANG_EN = "en"
LANG_DE = "de"
LANG_ES = "es"
LANG_FR = "fr"
LANG_IT = "it"

BUNDLED_LANGUAGES = (LANG_EN, LANG_DE, LANG_ES, LANG_FR, LANG_IT)

BUNDLED_MESSAGES: Dict[str, Dict[str, str]] = {
    MSG_UNABLE_TO_DECODE: {
        LANG_DE: "Als JSON kann nicht dekodiert werden",
        LANG_ES: "No se puede decodificar como JSON",
        LANG_FR: "Impossible de décoder en JSON",
        LANG_IT: "Impossibile decodificare come JSON",
    },
    MSG_NOT_JSON_NULL: {
        LANG_DE: "JSON darf nicht JSON null sein",
        LANG_ES: "JSON no debe ser JSON nulo",
        LANG_FR: "JSON ne doit pas être JSON null",
        LANG_IT: "JSON non deve essere JSON null",
    },
    MSG_NOT_JSON_ARRAY: {
        LANG_DE: "JSON darf kein JSON-Array sein",
        LANG_ES: "JSON no debe ser una matriz JSON",
        LANG_FR: "JSON ne doit pas être un tableau JSON",
        LANG_IT: "JSON non deve essere un array JSON",
    },
    MSG_NOT_JSON_OBJECT: {
        LANG_DE: "JSON darf kein JSON-Objekt sein",
        LANG_ES: "JSON no debe ser un objeto JSON",
        LANG_FR: "JSON ne doit pas être un objet JSON",
        LANG_IT: "JSON non deve essere un oggetto JSON",
    },
    MSG_EXPECTED_JSON_ARRAY: {
        LANG_DE: "JSON soll JSON-Array sein",
        LANG_ES: "Se esperaba que JSON fuera una matriz JSON",
        LANG_FR: "JSON devrait être un tableau JSON",
        LANG_IT: "JSON dovrebbe essere un array JSON",
    },
    MSG_EXPECTED_JSON_OBJECT: {
        LANG_DE: "JSON soll JSON-Objekt sein",
        LANG_ES: "Se esperaba que JSON fuera un objeto JSON",
        LANG_FR: "JSON devrait être un objet JSON",
        LANG_IT: "JSON dovrebbe essere un oggetto JSON",
    },
    MSG_ARRAY_ELEMENT_MUST_BE_OBJECT: {
        LANG_DE: "JSON-Array-Element muss ein Objekt sein",
        LANG_ES: "El elemento de matriz JSON debe ser un objeto",
        LANG_FR: "L'élément du tableau JSON doit être un objet",
        LANG_IT: "L'elemento dell'array JSON deve essere un oggetto",
    },
    MSG_ARRAY_ELEMENT_MUST_NOT_BE_NULL: {
        LANG_DE: "JSON-Array-Element darf nicht null sein",
        LANG_ES: "El elemento de matriz JSON no debe ser nulo",
        LANG_FR: "L'élément de tableau JSON ne doit pas être nul",
        LANG_IT: "L'elemento dell'array JSON non deve essere nullo",
    },
    MSG_MISSING_PROPERTY: {
        LANG_DE: "Fehlende Eigenschaft",
        LANG_ES: "Propiedad faltante",
        LANG_FR: "Propriété manquante",
        LANG_IT: "Proprietà mancante",
    },
    MSG_UNWANTED_PROPERTY: {
        LANG_DE: "Eigenschaft darf nicht vorhanden sein",
        LANG_ES: "La propiedad no debe estar presente",
        LANG_FR: "La propriété ne doit pas être présente",
        LANG_IT: "La proprietà non deve essere presente",
    },
    MSG_UNKNOWN_PROPERTY: {
        LANG_DE: "Unbekannte Eigenschaft",
        LANG_ES: "Propiedad desconocida",
        LANG_FR: "Propriété inconnue",
        LANG_IT: "Proprietà sconosciuta",
    },
    MSG_INVALID_PROPERTY_NAME: {
        LANG_DE: "Ungültiger Eigenschaftsname",
        LANG_ES: "Nombre de propiedad inválido",
        LANG_FR: "Nom de propriété invalide",
        LANG_IT: "Nome proprietà non valido",
    },
    MSG_PROPERTY_VALUE_MUST_BE_OBJECT: {
        LANG_DE: "Eigenschaftswert muss ein Objekt sein",
        LANG_ES: "El valor de la propiedad debe ser un objeto",
        LANG_FR: "La valeur de la propriété doit être un objet",
        LANG_IT: "Il valore della proprietà deve essere un oggetto",
    },
    MSG_PROPERTY_REQUIRED_WHEN: {
        LANG_DE: "Eigenschaft wird unter bestimmten Kriterien benötigt",
        LANG_ES: "Se requiere propiedad bajo ciertos criterios",
        LANG_FR: "La propriété est requise selon certains critères",
        LANG_IT: "La proprietà è richiesta secondo determinati criteri",
    },
    MSG_PROPERTY_UNWANTED_WHEN: {
        LANG_DE: "Eigenschaft darf unter bestimmten Voraussetzungen nicht vorhanden sein",
        LANG_ES: "La propiedad no debe estar presente bajo ciertas condiciones",
        LANG_FR: "La propriété ne doit pas être présente dans certaines conditions",
        LANG_IT: "La proprietà non deve essere presente in determinate condizioni",
    },
    MSG_VALUE_CANNOT_BE_NULL: {
        LANG_DE: "Wert darf nicht null sein",
        LANG_ES: "El valor no puede ser nulo",
        LANG_FR: "La valeur ne peut pas être nulle",
        LANG_IT: "Il valore non può essere nullo",
    },
    MSG_VALUE_MUST_BE_OBJECT: {
        LANG_DE: "Wert muss ein Objekt sein",
        LANG_ES: "El valor debe ser un objeto",
        LANG_FR: "La valeur doit être un objet",
        LANG_IT: "Il valore deve essere un oggetto",
    },
    MSG_VALUE_MUST_BE_ARRAY: {
        LANG_DE: "Wert muss ein Array sein",
        LANG_ES: "El valor debe ser una matriz",
        LANG_FR: "La valeur doit être un tableau",
        LANG_IT: "Il valore deve essere un array",
    },
    MSG_VALUE_MUST_BE_OBJECT_OR_ARRAY: {
        LANG_DE: "Wert muss ein Objekt oder Array sein",
        LANG_ES: "El valor debe ser un objeto o matriz",
        LANG_FR: "La valeur doit être un objet ou un tableau",
        LANG_IT: "Il valore deve essere un oggetto o un array",
    },
    MSG_PROPERTY_OBJECT_VALIDATOR_ERROR: {
        LANG_DE: "Objekt-Validator-Fehler - erlaubt kein Objekt oder Array!",
        LANG_ES: "Error del validador de objetos: ¡no permite el objeto o la matriz!",
        LANG_FR: "Erreur du validateur d'objet - n'autorise pas l'objet ou le tableau!",
        LANG_IT: "Errore del validatore di oggetti - non consente l'oggetto o l'array!",
    },
    MSG_FAILURE: {
        LANG_DE: "Validierung fehlgeschlagen",
        LANG_ES: "Validación fallida",
        LANG_FR: "Échec de la validation",
        LANG_IT: "Convalida non riuscita",
    },
    MSG_NOT_EMPTY_STRING: {
        LANG_DE: "Stringwert darf kein leerer String sein",
        LANG_ES: "El valor de la cadena no debe ser una cadena vacía",
        LANG_FR: "La valeur de la chaîne ne doit pas être une chaîne vide",
        LANG_IT: "Il valore della stringa non deve essere una stringa vuota",
    },
    MSG_NOT_BLANK_STRING: {
        LANG_DE: "String-Wert darf kein leerer String sein",
        LANG_ES: "El valor de la cadena no debe ser una cadena en blanco",
        LANG_FR: "La valeur de la chaîne ne doit pas être une chaîne vide",
        LANG_IT: "Il valore della stringa non deve essere una stringa vuota",
    },
    MSG_VALID_PATTERN: {
        LANG_DE: "String-Wert muss gültiges Muster haben",
        LANG_ES: "El valor de la cadena debe tener un patrón válido",
        LANG_FR: "La valeur de la chaîne doit avoir un modèle valide",
        LANG_IT: "Il valore della stringa deve avere un modello valido",
    },
    MSG_VALID_UUID: {
        LANG_DE: "Wert muss eine gültige UUID sein",
        LANG_ES: "El valor debe ser un UUID válido",
        LANG_FR: "La valeur doit être un UUID valide",
        LANG_IT: "Il valore deve essere un UUID valido",
    },
    MSG_POSITIVE: {
        LANG_DE: "Wert muss positiv sein",
        LANG_ES: "El valor debe ser positivo",
        LANG_FR: "La valeur doit être positive",
        LANG_IT: "Il valore deve essere positivo",
    },
    MSG_POSITIVE_OR_ZERO: {
        LANG_DE: "Wert muss positiv oder Null sein",
        LANG_ES: "El valor debe ser positivo o cero",
        LANG_FR: "La valeur doit être positive ou nulle",
        LANG_IT: "Il valore deve essere positivo o zero",
    },
    MSG_ARRAY_UNIQUE: {
        LANG_DE: "Array-Elemente müssen eindeutig sein",
        LANG_ES: "Los elementos del arreglo deben ser únicos",
        LANG_FR: "Les éléments du tableau doivent être uniques",
        LANG_IT: "Gli elementi dell'array devono essere univoci",
    },
    MSG_VALID_ISO_DATE: {
        LANG_DE: "Wert muss eine gültige Datumszeichenfolge sein (Format: JJJJ-MM-TT)",
        LANG_ES: "El valor debe ser una cadena de fecha válida (formato: AAAA-MM-DD)",
        LANG_FR: "La valeur doit être une chaîne de date valide (format : AAAA-MM-JJ)",
        LANG_IT: "Il valore deve essere una stringa di data valida (formato: AAAA-MM-GG)",
    },
    MSG_DATETIME_FUTURE: {
        LANG_DE: "Wert muss ein gültiges Datum/Zeit in der Zukunft sein",
        LANG_ES: "El valor debe ser una fecha/hora válida en el futuro",
        LANG_FR: "La valeur doit être une date/heure valide dans le futur",
        LANG_IT: "Il valore deve essere una data/ora valida nel futuro",
    },
    MSG_DATETIME_PAST: {
        LANG_DE: "Wert muss ein gültiges Datum/Zeit in der Vergangenheit sein",
        LANG_ES: "El valor debe ser una fecha/hora válida en el pasado",
        LANG_FR: "La valeur doit être une date/heure valide dans le passé",
        LANG_IT: "Il valore deve essere una data/ora valida nel passato",
    },
}

BUNDLED_FORMATS: Dict[str, Dict[str, str]] = {
    FMT_VALUE_EXPECTED_TYPE: {
        LANG_DE: "Wert sollte vom Typ {0} sein",
        LANG_ES: "Se espera que el valor sea del tipo {0}",
        LANG_FR: "Valeur supposée être de type {0}",
        LANG_IT: "Valore previsto di tipo {0}",
    },
    FMT_CONSTRAINT_SET_ALL_OF: {
        LANG_DE: "Einschränkungssatz muss alle {0} nicht offengelegten Validierungen bestehen",
        LANG_ES: "El conjunto de restricciones debe pasar todas las {0} validaciones no reveladas",
        LANG_FR: "L'ensemble de contraintes doit réussir toutes les {0} validations non divulguées",
        LANG_IT: "Il set di vincoli deve superare tutte le {0} convalide non divulgate",
    },
    FMT_CONSTRAINT_SET_ONE_OF: {
        LANG_DE: "Einschränkungssatz muss eine von {0} nicht offengelegten Validierungen bestehen",
        LANG_ES: "El conjunto de restricciones debe pasar una de {0} validaciones no reveladas",
        LANG_FR: "L'ensemble de contraintes doit réussir l'une des {0} validations non divulguées",
        LANG_IT: "Il set di vincoli deve superare una delle {0} convalide non divulgate",
    },
    FMT_STRING_MIN_LEN: {
        LANG_DE: "String-Wert muss mindestens {0} Zeichen lang sein",
        LANG_ES: "La longitud del valor de la cadena debe ser de al menos {0} caracteres",
        LANG_FR: "La longueur de la valeur de la chaîne doit être d'au moins {0} caractères",
        LANG_IT: "La lunghezza del valore della stringa deve essere di almeno {0} caratteri",
    },
    FMT_STRING_MAX_LEN: {
        LANG_DE: "Stringwertlänge darf {0} Zeichen nicht überschreiten",
        LANG_ES: "La longitud del valor de la cadena no debe exceder {0} caracteres",
        LANG_FR: "La longueur de la valeur de la chaîne ne doit pas dépasser {0} caractères",
        LANG_IT: "La lunghezza del valore della stringa non deve superare {0} caratteri",
    },
    FMT_STRING_MIN_MAX_LEN: {
        LANG_DE: "Stringwertlänge muss zwischen {0} ({1}) und {2} ({3}) liegen",
        LANG_ES: "La longitud del valor de la cadena debe estar entre {0} ({1}) y {2} ({3})",
        LANG_FR: "La longueur de la valeur de chaîne doit être comprise entre {0} ({1}) et {2} ({3})",
        LANG_IT: "La lunghezza del valore della stringa deve essere compresa tra {0} ({1}) e {2} ({3})",
    },
    FMT_VALID_TOKEN: {
        LANG_DE: "String-Wert muss gültiges Token sein - {0}",
        LANG_ES: "El valor de la cadena debe ser un token válido - {0}",
        LANG_FR: "La valeur de la chaîne doit être un jeton valide - {0}",
        LANG_IT: "Il valore della stringa deve essere un token valido - {0}",
    },
    FMT_GTE: {
        LANG_DE: "Wert muss größer oder gleich {0} sein",
        LANG_ES: "El valor debe ser mayor o igual que {0}",
        LANG_FR: "La valeur doit être supérieure ou égale à {0}",
        LANG_IT: "Il valore deve essere maggiore o uguale a {0}",
    },
    FMT_GT: {
        LANG_DE: "Wert muss größer als {0} sein",
        LANG_ES: "El valor debe ser mayor que {0}",
        LANG_FR: "La valeur doit être supérieure à {0}",
        LANG_IT: "Il valore deve essere maggiore di {0}",
    },
    FMT_LT: {
        LANG_DE: "Wert muss kleiner als {0} sein",
        LANG_ES: "El valor debe ser menor que {0}",
        LANG_FR: "La valeur doit être inférieure à {0}",
        LANG_IT: "Il valore deve essere inferiore a {0}",
    },
    FMT_LTE: {
        LANG_DE: "Wert muss kleiner oder gleich {0} sein",
        LANG_ES: "El valor debe ser menor o igual que {0}",
        LANG_FR: "La valeur doit être inférieure ou égale à {0}",
        LANG_IT: "Il valore deve essere inferiore o uguale a {0}",
    },
    FMT_RANGE: {
        LANG_DE: "Wert muss zwischen {0} ({1}) und {2} ({3}) liegen",
        LANG_ES: "El valor debe estar entre {0} ({1}) y {2} ({3})",
        LANG_FR: "La valeur doit être comprise entre {0} ({1}) et {2} ({3})",
        LANG_IT: "Il valore deve essere compreso tra {0} ({1}) e {2} ({3})",
    },
    FMT_MIN_MAX_LEN: {
        LANG_DE: "Wertlänge muss zwischen {0} ({1}) und {2} ({3}) liegen",
        LANG_ES: "La longitud del valor debe estar entre {0} ({1}) y {2} ({3})",
        LANG_FR: "La longueur de la valeur doit être comprise entre {0} ({1}) et {2} ({3})",
        LANG_IT: "La lunghezza del valore deve essere compresa tra {0} ({1}) e {2} ({3})",
    },
    FMT_EQUALS_OTHER: {
        LANG_DE: "Wert muss gleich dem Wert der Eigenschaft '{0}' sein",
        LANG_ES: "El valor debe ser igual al valor de la propiedad '{0}'",
        LANG_FR: "La valeur doit être égale à la valeur de la propriété '{0}'",
        LANG_IT: "Il valore deve essere uguale al valore della proprietà '{0}'",
    },
}

BUNDLED_TOKENS: Dict[str, Dict[str, str]] = {
    TOKEN_INCLUSIVE: {LANG_DE: "inklusive", LANG_ES: "inclusivo", LANG_FR: "inclusif", LANG_IT: "comprensivo"},
    TOKEN_EXCLUSIVE: {LANG_DE: "exklusiv", LANG_ES: "exclusivo", LANG_FR: "exclusif", LANG_IT: "esclusivo"},
    "string": {LANG_DE: "Zeichenfolge", LANG_ES: "cadena", LANG_FR: "chaîne", LANG_IT: "stringa"},
    "number": {LANG_DE: "Nummer", LANG_ES: "número", LANG_FR: "nombre", LANG_IT: "numero"},
    "integer": {LANG_DE: "Ganzzahl", LANG_ES: "entero", LANG_FR: "entier", LANG_IT: "intero"},
    "boolean": {LANG_DE: "boolesch", LANG_ES: "booleano", LANG_FR: "booléen", LANG_IT: "booleano"},
    "object": {LANG_DE: "Objekt", LANG_ES: "objeto", LANG_FR: "objet", LANG_IT: "oggetto"},
    "array": {LANG_DE: "Array", LANG_ES: "matriz", LANG_FR: "tableau", LANG_IT: "array"},
}
