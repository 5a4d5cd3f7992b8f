# Keyword rule tables: canonical code -> alias keywords found in scanned text.
# Declaration order is evaluation order; the first rule with a hit wins.
FUEL_RULES = {
    'GASOIL': ['GASOIL', 'GAS OIL', 'DIESEL', 'DIÉSEL'],
    'GASOLINA': ['GASOLINA', 'NAFTA'],
    'ELECTRICO': ['ELECTRICO', 'ELÉCTRICO'],
    'HIBRIDO': ['HIBRIDO', 'HÍBRIDO'],
}

DESTINATION_RULES = {
    'PARTICULAR': ['PARTICULAR', 'PRIVADO'],
    'COMERCIAL': ['COMERCIAL', 'TRABAJO'],
}

CATEGORY_RULES = {
    'AUTOMOVIL': ['AUTOMOVIL', 'AUTOMÓVIL', 'AUTO'],
    'CAMIONETA': ['CAMIONETA', 'PICK'],
    'MOTO': ['MOTO'],
}

QUALITY_RULES = {
    'PROPIETARIO': ['PROPIETARIO', 'TITULAR'],
    'ARRENDATARIO': ['ARRENDATARIO', 'LEASING'],
}

TARIFF_RULES = {
    'TODO RIESGO': ['TODO RIESGO'],
    'TERCEROS': ['TERCEROS', 'RESPONSABILIDAD CIVIL'],
}

CURRENCY_RULES = {
    'USD': ['840', 'USD', 'U$S', 'DOLAR', 'DÓLAR'],
    'UYU': ['858', 'UYU', 'PESO'],
}

# Reference field -> rule table
RULE_TABLES = {
    'fuel': FUEL_RULES,
    'destination': DESTINATION_RULES,
    'category': CATEGORY_RULES,
    'quality': QUALITY_RULES,
    'tariff': TARIFF_RULES,
    'currency': CURRENCY_RULES,
}
