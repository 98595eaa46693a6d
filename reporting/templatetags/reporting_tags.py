from django import template

from reporting import presenters

register = template.Library()


@register.filter
def currency(value):
    return presenters.format_currency(value)


@register.filter
def percent(value, digits=1):
    return presenters.format_percent(value, int(digits))


@register.filter
def status_color(value):
    return presenters.status_color(value)


@register.filter
def category_color(value):
    return presenters.category_color(value)


@register.inclusion_tag("reporting/badge.html")
def status_badge(status):
    return {"style": presenters.style_for(status)}


@register.simple_tag
def bar(value, maximum):
    return presenters.bar_width(value, maximum)
