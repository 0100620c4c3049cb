"""Basic plotting functions."""

from numbers import Number
from typing import Optional, Union, List, Tuple

import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns


def simple_plotting_function(
    x: Union[Number, np.array],
    ys: np.array,
    labels: Optional[List[str]] = None,
    colors: Optional[List[str]] = None,
    ax: Optional[plt.Axes] = None,
    **kwargs
) -> plt.Axes:
    """
    Plots multiple y series over the same x values.

    Parameters
    ----------
    x : Number or np.array
        x values. If a single number is provided, the index of each y value is used.
    ys : np.array
        y values, each row is a series to be plotted.
    labels : List[str], optional
        Labels for the series, by default None.
    colors : List[str], optional
        Colors for the series, by default None.
    ax : plt.Axes, optional
        Matplotlib axes object to plot on, by default None.

    Returns
    -------
    plt.Axes
        The axes object with the plot.
    """
    ax = plt.gca() if ax is None else ax
    x = np.arange(ys.shape[-1]) if isinstance(x, Number) else x
    colors = sns.color_palette("tab10", ys.shape[0]) if colors is None else colors
    labels = np.arange(ys.shape[0]) if labels is None else labels

    for label, y, color in zip(labels, ys, colors):
        kwargs["label"] = label
        kwargs["color"] = color
        ax.plot(x, y, **kwargs)

    return ax


def sensitivity_plot(
    wavelengths: np.array,
    T: np.array,
    labels: Optional[List[str]] = None,
    colors: Optional[List[str]] = None,
    ax: Optional[plt.Axes] = None,
    ylabel: str = "Sensitivity",
    legend: bool = True,
    **kwargs
) -> plt.Axes:
    """
    Plot one spectral sensitivity curve per receptor.

    Parameters
    ----------
    wavelengths : np.array
        Wavelengths in nm.
    T : np.array of shape (n_receptors, n_wls)
        Spectral sensitivities.
    labels : List[str], optional
        Receptor labels, by default None.
    colors : List[str], optional
        Colors for each receptor, by default None.
    ax : plt.Axes, optional
        Matplotlib axes object to plot on, by default None.
    ylabel : str, optional
        Label of the y axis, by default 'Sensitivity'.
    legend : bool, optional
        Whether to draw a legend, by default True.

    Returns
    -------
    plt.Axes
        The axes object with the plot.
    """
    kwargs.setdefault("linewidth", 2)
    ax = simple_plotting_function(wavelengths, np.atleast_2d(T), labels, colors, ax, **kwargs)
    ax.set_xlabel("Wavelength [nm]")
    ax.set_ylabel(ylabel)
    if legend:
        ax.legend(frameon=False)
    return ax


def population_plot(
    wavelengths: np.array,
    Ts: np.array,
    labels: Optional[List[str]] = None,
    colors: Optional[List[str]] = None,
    percentiles: Tuple[float, float] = (2.5, 97.5),
    ax: Optional[plt.Axes] = None,
    alpha: float = 0.3,
    **kwargs
) -> plt.Axes:
    """
    Plot the mean of a population of sensitivities with a percentile band.

    Parameters
    ----------
    wavelengths : np.array
        Wavelengths in nm.
    Ts : np.array of shape (n_samples, n_receptors, n_wls)
        Sensitivities of each resampled observer.
    labels : List[str], optional
        Receptor labels, by default None.
    colors : List[str], optional
        Colors for each receptor, by default None.
    percentiles : tuple of float, optional
        Lower and upper percentile of the band, by default (2.5, 97.5).
    ax : plt.Axes, optional
        Matplotlib axes object to plot on, by default None.
    alpha : float, optional
        Opacity of the band, by default 0.3.

    Returns
    -------
    plt.Axes
        The axes object with the plot.
    """
    Ts = np.asarray(Ts)
    if Ts.ndim != 3:
        raise ValueError(f"`Ts` must be three-dimensional, got shape {Ts.shape}.")
    colors = sns.color_palette("tab10", Ts.shape[1]) if colors is None else colors
    lower, upper = np.nanpercentile(Ts, percentiles, axis=0)
    ax = sensitivity_plot(
        wavelengths, np.nanmean(Ts, axis=0), labels, colors, ax, legend=False, **kwargs
    )
    for low, high, color in zip(lower, upper, colors):
        ax.fill_between(wavelengths, low, high, color=color, alpha=alpha, linewidth=0)
    if labels is not None:
        ax.legend(frameon=False)
    return ax
