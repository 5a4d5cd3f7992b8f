# Alias keys per canonical field, most specific first.
# Keys are compared exactly, then case-insensitively.
FIELD_ALIASES = {
    "policy_number": [
        "poliza.numero", "poliza_numero", "numero_poliza", "Nº de Póliza", "datos_poliza",
    ],
    "endorsement": ["poliza.endoso", "endoso", "datos_poliza"],
    "start_date": [
        "poliza.fecha-desde", "poliza.vigencia.desde", "poliza.fecha_desde",
        "vigencia.desde", "vigencia_desde", "confchdes", "datos_poliza",
    ],
    "end_date": [
        "poliza.fecha-hasta", "poliza.vigencia.hasta", "poliza.fecha_hasta",
        "vigencia.hasta", "vigencia_hasta", "confchhas", "datos_poliza",
    ],
    "movement_type": [
        "tipoMovimiento", "tipo_movimiento", "movement_type", "operacion",
        "operation", "tipo_operacion",
    ],
    "premium": [
        "poliza.prima_comercial", "financiero.prima_comercial", "pago.cuotas[0].prima",
        "prima_comercial", "conpremio", "premio", "datos_financiero",
    ],
    "total_amount": [
        "financiero.premio_total", "premio_total", "contot", "total",
        "PREMIO TOTAL A PAGAR", "datos_financiero",
    ],
    "installment_count": [
        "pago.cantidad_cuotas", "cantidadCuotas", "pago.modo_facturacion",
        "cantidad_cuotas", "cuotas", "concuo",
    ],
    "payment_method": [
        "pago.medio", "pago.forma", "pago.forma_de_pago", "forma_pago",
        "payment_method", "metodo_pago",
    ],
    "currency": ["moneda", "financiero.moneda", "currency", "divisa"],
    "vehicle_brand": ["vehiculo.marca", "marca", "MARCA", "conmaraut"],
    "vehicle_model": ["vehiculo.modelo", "modelo", "MODELO", "conmodaut"],
    "vehicle_year": ["vehiculo.anio", "vehiculo.año", "año", "AÑO", "anio", "conanioaut"],
    "vehicle_motor": ["vehiculo.motor", "motor", "MOTOR", "numero_motor"],
    "vehicle_chassis": ["vehiculo.chasis", "chasis", "CHASIS", "numero_chasis"],
    "vehicle_plate": ["vehiculo.matricula", "vehiculo.patente", "matricula", "MATRICULA", "placa", "patente"],
    "vehicle_fuel": ["vehiculo.combustible", "combustible", "COMBUSTIBLE"],
    "vehicle_destination": [
        "vehiculo.destino_del_vehiculo", "vehiculo.destino", "destino", "DESTINO DEL VEHÍCULO",
    ],
    "vehicle_category": [
        "vehiculo.tipo_de_vehiculo", "vehiculo.tipo_vehiculo", "vehiculo.tipo",
        "categoria", "TIPO DE VEHÍCULO",
    ],
    "client_name": ["asegurado.nombre", "cliente.nombre", "tomador.nombre", "nombre_asegurado", "datos_asegurado"],
    "client_document": ["asegurado.documento.numero", "asegurado.documento", "cliente.documento", "documento"],
    "client_address": ["asegurado.direccion", "cliente.direccion", "direccion", "DIRECCION", "domicilio", "address"],
    "department": ["asegurado.departamento", "departamento", "depto", "dptnom", "asegurado.localidad"],
    "quality": ["vehiculo.calidad_de_contratante", "calidad_de_contratante", "CALIDAD DE CONTRATANTE"],
    "tariff": ["poliza.modalidad_normalizada", "poliza.modalidad", "vehiculo.modalidad", "modalidad"],
    "broker_name": ["corredor.nombre", "corredor", "agente.nombre"],
    "broker_code": ["corredor.numero", "corredor.codigo", "agente.numero"],
}

# Label literals the OCR engine leaves inside values
FIELD_LABELS = {
    "policy_number": ["Nº de Póliza", "N° de Póliza", "Número de Póliza", "Póliza", "Poliza", "Certificado", "Nº", "N°"],
    "vehicle_brand": ["MARCA"],
    "vehicle_model": ["MODELO"],
    "vehicle_year": ["AÑO", "ANIO"],
    "vehicle_motor": ["NÚMERO DE MOTOR", "NUMERO DE MOTOR", "NRO. MOTOR", "MOTOR"],
    "vehicle_chassis": ["NÚMERO DE CHASIS", "NUMERO DE CHASIS", "NRO. CHASIS", "CHASIS"],
    "vehicle_plate": ["MATRÍCULA", "MATRICULA", "PATENTE", "PLACA"],
    "vehicle_fuel": ["COMBUSTIBLE"],
    "vehicle_destination": ["DESTINO DEL VEHÍCULO", "DESTINO DEL VEHICULO", "DESTINO"],
    "vehicle_category": ["TIPO DE VEHÍCULO", "TIPO DE VEHICULO", "CATEGORÍA", "CATEGORIA", "TIPO"],
    "department": ["DEPARTAMENTO", "DEPTO.", "DEPTO", "DPTO.", "DPTO"],
    "quality": ["CALIDAD DE CONTRATANTE", "CALIDAD"],
    "client_name": ["Nombre", "Asegurado", "Tomador"],
    "client_document": ["Documento", "C.I.", "CI", "RUT"],
    "client_address": ["Dirección", "Direccion", "Domicilio"],
    "broker_name": ["Corredor", "Nombre", "Name"],
    "payment_method": ["Forma de pago", "Medio de pago"],
}

# Policy number
POLICY_NUMBER_PATTERN = r"(?<!\d)(\d{7,9})(?!\d)"
LABELLED_POLICY_NUMBER_PATTERN = (
    r"(?:Póliza|Poliza|Certificado|Policy)\s*(?:N[°º]|No\.|#)?\s*:?\s*([A-Z0-9][A-Z0-9\-/]*)"
)
ENDORSEMENT_PATTERN = r"Endoso\s*:?\s*(\d+)"

# Dates, tried in order
DATE_FORMATS = [
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d/%m/%y",
    "%m/%d/%y",
    "%d-%m-%y",
    "%d.%m.%y",
]
DATE_TOKEN_PATTERN = (
    r"(?<!\d)(\d{4}[/-]\d{1,2}[/-]\d{1,2}|\d{1,2}[/.-]\d{1,2}[/.-](?:\d{4}|\d{2}))(?!\d)"
)
TEXT_DATE_PATTERNS = [
    (r"\b(\d{1,2})\s+(?:de\s+)?([A-Za-zÁÉÍÓÚáéíóú]+)\.?,?\s+(?:de\s+|del\s+)?(\d{4})\b", "dmy_text"),
    (r"\b([A-Za-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b", "mdy_text"),
]
START_DATE_LABEL_PATTERN = r"(?:desde|inicio|vigencia)\s*:?\s*"
END_DATE_LABEL_PATTERN = r"(?:hasta|fin|vencimiento)\s*:?\s*"

MONTH_NAMES = {
    "ene": 1, "enero": 1, "jan": 1, "january": 1,
    "feb": 2, "febrero": 2, "february": 2,
    "mar": 3, "marzo": 3, "march": 3,
    "abr": 4, "abril": 4, "apr": 4, "april": 4,
    "may": 5, "mayo": 5,
    "jun": 6, "junio": 6, "june": 6,
    "jul": 7, "julio": 7, "july": 7,
    "ago": 8, "agosto": 8, "aug": 8, "august": 8,
    "set": 9, "sep": 9, "sept": 9, "setiembre": 9, "septiembre": 9, "september": 9,
    "oct": 10, "octubre": 10, "october": 10,
    "nov": 11, "noviembre": 11, "november": 11,
    "dic": 12, "diciembre": 12, "dec": 12, "december": 12,
}

# Amounts: Uruguayan (1.234,56) before standard (1,234.56)
UY_AMOUNT_PATTERN = r"(?<![\d.,])(-?\d{1,3}(?:\.\d{3})*,\d{1,2})(?![\d,])"
STANDARD_AMOUNT_PATTERN = r"(?<![\d.,])(-?\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|-?\d+\.\d{1,2})(?![\d.,])"
AMOUNT_TOKEN_PATTERN = r"-?\d[\d.,]*"
TOTAL_TO_PAY_PATTERN = r"Premio\s+Total\s+a\s+Pagar\s*:?\s*(?:\$|U\$S|USD|UYU)?\s*([\d.,]+)"
LABELLED_PREMIUM_PATTERN = r"(?:Prima\s+Comercial|Premio)\s*:?\s*(?:\$|U\$S|USD|UYU)?\s*([\d.,]+)"

# Installments
INSTALLMENT_COUNT_PATTERN = r"(?<!\d)(\d{1,2})\s*(?:cuotas?|pagos?)\b"
MAX_INSTALLMENTS = 60

# Vehicle
YEAR_PATTERN = r"\b(19\d{2}|20\d{2})\b"
PLATE_PLACEHOLDERS = {"", "-", "--", "MATRICULA", "MATRÍCULA", "PATENTE", "0KM", "0 KM", "S/M", "N/A", "EN TRAMITE", "EN TRÁMITE"}
PLATE_LABEL_WORDS = {"MATRICULA", "MATRÍCULA", "PATENTE", "PLACA", "MOTOR", "CHASIS", "MARCA", "MODELO"}
PLATE_PATTERNS = [
    r"\b([A-Z]{3}\s?-?\s?\d{4})\b",
    r"\b([A-Z]{2}\s?-?\s?\d{3,4})\b",
    r"\b([A-Z]\s?\d{5,6})\b",
]

# Movement type keywords, first hit wins
MOVEMENT_TYPE_KEYWORDS = [
    ("EMISION", ["EMISION", "EMISIÓN", "NUEVA", "NUEVO", "ALTA"]),
    ("RENOVACION", ["RENOVACION", "RENOVACIÓN", "RENEWAL"]),
    ("ENDOSO", ["ENDOSO", "MODIFICACION", "MODIFICACIÓN", "CAMBIO"]),
    ("ANULACION", ["ANULACION", "ANULACIÓN", "CANCELACION", "CANCELACIÓN"]),
]
DEFAULT_MOVEMENT_TYPE = "EMISION"

# Payment method keywords, first hit wins
PAYMENT_METHOD_KEYWORDS = [
    ("DEBITO AUTOMATICO", ["DEBITO", "DÉBITO"]),
    ("TARJETA", ["TARJETA"]),
    ("TRANSFERENCIA", ["TRANSFERENCIA"]),
    ("CONTADO", ["CONTADO", "EFECTIVO"]),
    ("CREDITO", ["CREDITO", "CRÉDITO"]),
]

# ISO 4217 numeric codes
CURRENCY_KEYWORDS = [
    ("840", ["USD", "U$S", "DOLAR", "DÓLAR", "DOLARES", "DÓLARES"]),
    ("858", ["UYU", "$U", "PESO", "PESOS"]),
]
