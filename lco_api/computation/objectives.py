# lco_api/computation/objectives.py

from enum import IntEnum


class Objective(IntEnum):
    GLOBAL_WARMING = 1
    OZONE_DEPLETION = 2
    ACIDIFICATION = 3
    EUTROPHICATION = 4
    HEAVY_METALS = 5
    CARCINOGENS = 6
    SUMMER_SMOG = 7
    WINTER_SMOG = 8
    ENERGY_RESOURCES = 9
    SOLID_WASTE = 10
    COST = 11

    @property
    def is_cost(self) -> bool:
        return self is Objective.COST

    @property
    def impact_type(self) -> str:
        return IMPACT_TYPES[self]

    @property
    def unit(self) -> str:
        if self is Objective.ENERGY_RESOURCES:
            return "MJ"
        if self is Objective.COST:
            return "USD"
        return "KILOGRAM"

    @property
    def coefficient_set(self) -> str:
        return COEFFICIENT_SETS[self]


IMPACT_TYPES = {
    Objective.GLOBAL_WARMING: "GHG",
    Objective.OZONE_DEPLETION: "OZONEDEP",
    Objective.ACIDIFICATION: "SOX",
    Objective.EUTROPHICATION: "EUTPOT",
    Objective.HEAVY_METALS: "HEAVYMET",
    Objective.CARCINOGENS: "CARCINOGENS",
    Objective.SUMMER_SMOG: "SUMSMOG",
    Objective.WINTER_SMOG: "WINSMOG",
    Objective.ENERGY_RESOURCES: "ENERGY",
    Objective.SOLID_WASTE: "SOLWASTE",
    Objective.COST: "COST",
}

# Coefficient sheet used to value repairs for each objective.
# Cost runs scale the energy-resource coefficients by each repair's cost factor.
COEFFICIENT_SETS = {
    Objective.GLOBAL_WARMING: "GW",
    Objective.OZONE_DEPLETION: "ODP",
    Objective.ACIDIFICATION: "AP",
    Objective.EUTROPHICATION: "EP",
    Objective.HEAVY_METALS: "HM",
    Objective.CARCINOGENS: "CG",
    Objective.SUMMER_SMOG: "SS",
    Objective.WINTER_SMOG: "WS",
    Objective.ENERGY_RESOURCES: "ER",
    Objective.SOLID_WASTE: "SW",
    Objective.COST: "ER",
}
