"""
Selection state transitions for the country -> province -> city picker.

Every function takes a SelectionState and returns a new one; nothing here
touches the network or the cache.
"""
from typing import Optional, Union

from models import Country, SelectionState, Step
from services.normalizer import COUNTRIES_KEY, cities_key, provinces_key


def initial_state() -> SelectionState:
    return SelectionState()


def advance(state: SelectionState, choice: Union[Country, str]) -> SelectionState:
    """Move one step forward with the user's choice for the current step"""
    if state.step == Step.COUNTRY:
        if not isinstance(choice, Country):
            raise TypeError("A country step needs a Country choice")
        return state.model_copy(update={
            "step": Step.PROVINCE,
            "selected_country": choice,
            "selected_province": None,
            "selected_city": None,
            "search_query": "",
            "last_error": None,
        })

    if state.step == Step.PROVINCE:
        return state.model_copy(update={
            "step": Step.CITY,
            "selected_province": str(choice),
            "selected_city": None,
            "search_query": "",
            "last_error": None,
        })

    if state.step == Step.CITY:
        return state.model_copy(update={
            "step": Step.SELECTED,
            "selected_city": str(choice),
        })

    raise ValueError("Selection is already complete")


def back(state: SelectionState) -> SelectionState:
    """Return to the parent step, dropping choices that no longer apply"""
    if state.step == Step.CITY:
        update = {"step": Step.PROVINCE, "selected_province": None}
    elif state.step == Step.PROVINCE:
        update = {"step": Step.COUNTRY, "selected_country": None, "selected_province": None}
    else:
        return state

    update.update({"selected_city": None, "search_query": "", "last_error": None})
    return state.model_copy(update=update)


def set_search(state: SelectionState, query: Optional[str]) -> SelectionState:
    return state.model_copy(update={"search_query": query or ""})


def set_error(state: SelectionState, message: Optional[str]) -> SelectionState:
    return state.model_copy(update={"last_error": message or None})


def required_key(state: SelectionState) -> Optional[str]:
    """Cache key holding the options for the current step"""
    if state.step == Step.COUNTRY:
        return COUNTRIES_KEY
    if state.step == Step.PROVINCE and state.selected_country:
        return provinces_key(state.selected_country.name)
    if state.step == Step.CITY and state.selected_country and state.selected_province:
        return cities_key(state.selected_country.name, state.selected_province)
    return None
