"""Hand-authored brand/model catalogs used for seed and fallback rows.

Tractors and boats are not exposed by the pricing API, so their catalogs
are the only source for those categories. The car, motorcycle and truck
catalogs are smaller and only used when live collection falls short.
"""

from __future__ import annotations

from datetime import date

from ..common.config import SeedSettings, settings
from ..common.models import VehicleType

Catalog = dict[str, list[str]]


def _combine(entries: list[tuple[str, list[str]]]) -> Catalog:
    """Fold repeated brands into one entry, keeping first-seen order."""
    catalog: Catalog = {}
    for brand, models in entries:
        bucket = catalog.setdefault(brand, [])
        bucket.extend(m for m in models if m not in bucket)
    return catalog


TRACTORS: Catalog = _combine([
    ("John Deere", ["5075E", "5090E", "6100J", "6115J", "6125J", "7200J", "7230J", "8400R", "9R 590", "9RX 640"]),
    ("Massey Ferguson", ["MF 4275", "MF 4292", "MF 4707", "MF 6713", "MF 7715", "MF 7719", "MF 8700 S"]),
    ("New Holland", ["TL5.80", "TL5.100", "T6.130", "T7.205", "T7.240", "T8.435", "T9.700"]),
    ("Valtra", ["A84", "A94", "A114", "A144", "BH194", "BH224", "T250 CVT"]),
    ("Case IH", ["Farmall 80", "Farmall 100", "Puma 200", "Magnum 340", "Magnum 400", "Steiger 620"]),
    ("Agrale", ["540.4", "575.4", "4230", "7215"]),
    ("LS Tractor", ["H145", "U60", "XU6168"]),
    ("Yanmar", ["Solis 26", "Solis 90", "YM 347"]),
    # Harvesters and sprayers are stored as tractors
    ("John Deere", ["S430 (Colheitadeira)", "S700 (Colheitadeira)", "M4040 (Pulverizador)", "M4030"]),
    ("Case IH", ["Axial-Flow 4130", "Axial-Flow 8250", "Patriot 250"]),
    ("New Holland", ["TC 5.90", "CR 7.90", "Defensor 2500"]),
])

BOATS: Catalog = _combine([
    ("Focker", ["160", "190 Style", "210", "215", "240", "242 GTO", "270", "330", "388 Gran Turismo"]),
    ("Phantom", ["303", "345", "365", "375", "400", "500", "620"]),
    ("Schaefer", ["303", "365", "375", "400", "510", "580", "660", "770"]),
    ("Real", ["220", "24", "270", "280", "330", "365", "40", "525", "60"]),
    ("Cimitarra", ["340", "360", "440", "500", "540", "600", "760"]),
    ("Bayliner", ["VR5", "VR6", "280", "320", "350"]),
    ("Sea-Doo", ["Spark", "GTI 130", "GTI 170", "GTR 230", "RXP-X 300", "RXT-X 300", "GTX 300"]),
    ("Yamaha", ["VX Cruiser", "GP1800R", "FX Cruiser", "SuperJet", "FX SVHO"]),
])

CARS: Catalog = _combine([
    ("Fiat", ["Mobi", "Argo", "Cronos", "Pulse", "Toro", "Strada"]),
    ("Volkswagen", ["Gol", "Polo", "Virtus", "T-Cross", "Nivus", "Amarok"]),
    ("Chevrolet", ["Onix", "Onix Plus", "Tracker", "Spin", "S10"]),
    ("Toyota", ["Yaris", "Corolla", "Corolla Cross", "Hilux", "SW4"]),
    ("Hyundai", ["HB20", "HB20S", "Creta"]),
    ("Renault", ["Kwid", "Sandero", "Duster"]),
    ("BMW", ["320i", "X1", "X3"]),
    ("Mercedes-Benz", ["C 200", "GLA 200"]),
])

MOTORCYCLES: Catalog = _combine([
    ("Honda", ["Biz 125", "CG 160 Fan", "CG 160 Titan", "XRE 300", "CB 500F", "CB 1000R"]),
    ("Yamaha", ["Factor 150", "Fazer 250", "XTZ 250 Lander", "MT-03", "MT-09", "YZF-R1"]),
    ("Kawasaki", ["Ninja 400", "Z400", "Z900"]),
    ("BMW", ["G 310 R", "F 850 GS", "S 1000 RR"]),
    ("Suzuki", ["GSX-S750", "V-Strom 650"]),
])

TRUCKS: Catalog = _combine([
    ("Volvo", ["FH 460", "FH 540", "FM 380", "VM 270"]),
    ("Scania", ["P 320", "G 410", "R 450", "R 540"]),
    ("Mercedes-Benz", ["Accelo 1016", "Atego 2426", "Actros 2651"]),
    ("Volkswagen", ["Delivery 11.180", "Constellation 24.280", "Meteor 29.520"]),
    ("Iveco", ["Daily 35-160", "Tector 240E28", "S-Way 540"]),
    ("DAF", ["XF 530", "CF 410"]),
])

SEED_CATALOGS: dict[VehicleType, Catalog] = {
    VehicleType.CAR: CARS,
    VehicleType.MOTORCYCLE: MOTORCYCLES,
    VehicleType.TRUCK: TRUCKS,
    VehicleType.TRACTOR: TRACTORS,
    VehicleType.BOAT: BOATS,
}


def year_range(
    vehicle_type: VehicleType,
    current_year: int | None = None,
    seed_settings: SeedSettings | None = None,
) -> range:
    """Model years to generate, inclusive of next year's models.

    Types listed in ``trailing_years`` cover only that many years ending at
    ``current_year + 1``; everything else starts at ``first_year``.
    """
    seed_settings = seed_settings or settings.seed
    current_year = current_year if current_year is not None else date.today().year
    last_year = current_year + 1

    first_year = seed_settings.first_year
    window = seed_settings.trailing_years.get(vehicle_type.value)
    if window:
        first_year = last_year - window + 1
    return range(first_year, last_year + 1)


def catalog_size(catalog: Catalog) -> int:
    """Number of (brand, model) pairs in a catalog."""
    return sum(len(models) for models in catalog.values())
