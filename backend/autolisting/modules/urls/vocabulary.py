"""Whole-word substitutions applied to titles before slugging.

Maps listing vocabulary (brand-name quirks, transmission abbreviations,
colors, fuels, body styles, conditions, features) to the pt-BR tokens used
in public urls. Order matters: entries are applied top to bottom, so longer
phrases come before their prefixes ("GM - Chevrolet" before "GM -").

Changing this table changes generated urls. Bump ``VOCABULARY_VERSION`` and
run the vehicle url regeneration script so old urls get redirects.
"""

VOCABULARY_VERSION = 1

SLUG_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    # Brands
    ("GM - Chevrolet", "chevrolet"),
    ("GM -", ""),
    ("GM-", ""),
    # Transmission
    ("Aut.", "automatico"),
    ("Man.", "manual"),
    ("Automatic", "automatico"),
    ("Manual", "manual"),
    ("CVT", "cvt"),
    ("AT", "automatico"),
    ("MT", "manual"),
    # Colors
    ("White", "branco"),
    ("Black", "preto"),
    ("Red", "vermelho"),
    ("Blue", "azul"),
    ("Green", "verde"),
    ("Yellow", "amarelo"),
    ("Orange", "laranja"),
    ("Purple", "roxo"),
    ("Pink", "rosa"),
    ("Brown", "marrom"),
    ("Gray", "cinza"),
    ("Grey", "cinza"),
    ("Silver", "prata"),
    ("Gold", "dourado"),
    ("Beige", "bege"),
    # Fuel
    ("Gasoline", "gasolina"),
    ("Diesel", "diesel"),
    ("Ethanol", "etanol"),
    ("Flex", "flex"),
    ("Hybrid", "hibrido"),
    ("Electric", "eletrico"),
    # Body styles
    ("SUV", "suv"),
    ("Pickup", "pickup"),
    ("Hatchback", "hatchback"),
    ("Sedan", "sedan"),
    ("Coupe", "coupe"),
    ("Convertible", "conversivel"),
    ("Wagon", "perua"),
    ("Van", "van"),
    ("Truck", "caminhao"),
    ("Motorcycle", "moto"),
    ("Bike", "moto"),
    # Condition
    ("New", "novo"),
    ("Used", "usado"),
    ("Certified", "certificado"),
    ("Pre-owned", "seminovo"),
    # Features
    ("4WD", "4x4"),
    ("AWD", "4x4"),
    ("FWD", "dianteira"),
    ("RWD", "traseira"),
    ("ABS", "abs"),
    ("Airbag", "airbag"),
    ("Air Conditioning", "ar-condicionado"),
    ("AC", "ar-condicionado"),
    ("Power Steering", "direcao-hidraulica"),
    ("Power Windows", "vidros-eletricos"),
    ("Central Lock", "travas-eletricas"),
    ("Alarm", "alarme"),
    ("Immobilizer", "imobilizador"),
)
