from dishka import Provider as DishkaProvider

from cityhealth.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for CityHealth DI providers.

    Factories without an explicit scope live for the whole application.
    """

    scope = Scope.APP
