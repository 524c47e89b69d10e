"""
Metrics collection and storage for benchmarking the learners.

This module records one LearningMetrics per learning run and aggregates
them per grammar and learner configuration for comparison.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
import json
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path

from core.results import LearningResult


@dataclass
class LearningMetrics:
    """Metrics collected during a single learning run.

    Key accuracy metrics:
    - train_accuracy: Agreement with the examples the learner saw
    - test_accuracy: Agreement with the true grammar on the test set
    """

    total_time: float = 0.0

    # Query and round counts
    rounds: int = 0
    membership_queries: int = 0
    examples: int = 0
    counterexamples_found: int = 0
    counterexample_lengths: List[int] = field(default_factory=list)

    # Hypothesis properties
    dimension: int = 0
    dimension_before_minimization: Optional[int] = None

    # Primary accuracy metrics
    train_accuracy: float = 0.0
    test_accuracy: float = 0.0
    confusion: Dict[str, Any] = field(default_factory=dict)

    # Outcome
    status: str = "failed"
    issues: List[str] = field(default_factory=list)
    learning_successful: bool = False
    failure_reason: Optional[str] = None

    @property
    def avg_counterexample_length(self) -> float:
        """Average length of counterexamples found."""
        if not self.counterexample_lengths:
            return 0.0
        return sum(self.counterexample_lengths) / len(self.counterexample_lengths)

    @classmethod
    def from_result(cls, result: LearningResult) -> 'LearningMetrics':
        """Copy the run statistics of a learning result."""
        stats = result.statistics
        return cls(
            total_time=stats.get('total_time', 0.0),
            rounds=stats.get('rounds', 0),
            membership_queries=stats.get('membership_queries', 0),
            examples=stats.get('examples', 0),
            counterexamples_found=stats.get('counterexamples', 0),
            counterexample_lengths=list(stats.get('counterexample_lengths', [])),
            dimension=result.hypothesis.dimension if result.hypothesis is not None else 0,
            dimension_before_minimization=stats.get('dimension_before_minimization'),
            status=result.status.value,
            issues=[issue.kind.value for issue in result.issues],
            learning_successful=result.succeeded,
            failure_reason=str(result.issues[0]) if result.issues and not result.succeeded else None,
        )


def confusion_metrics(tp: int, fp: int, tn: int, fn: int) -> Dict[str, float]:
    """Calculate various metrics from confusion matrix values."""
    total = tp + fp + tn + fn

    # Basic metrics
    accuracy = (tp + tn) / total if total > 0 else 0.0
    precision = tp / (tp + fp) if tp + fp > 0 else 0.0
    recall = tp / (tp + fn) if tp + fn > 0 else 0.0
    specificity = tn / (tn + fp) if tn + fp > 0 else 0.0

    # F1 score
    f1 = 2 * precision * recall / (precision + recall) if precision + recall > 0 else 0.0

    # Matthews Correlation Coefficient
    mcc_denominator = ((tp + fp) * (tp + fn) * (tn + fp) * (tn + fn)) ** 0.5
    mcc = ((tp * tn) - (fp * fn)) / mcc_denominator if mcc_denominator > 0 else 0.0

    return {
        'tp': tp,
        'fp': fp,
        'tn': tn,
        'fn': fn,
        'accuracy': accuracy,
        'precision': precision,
        'recall': recall,
        'specificity': specificity,
        'f1': f1,
        'balanced_accuracy': (recall + specificity) / 2,
        'mcc': mcc
    }


@dataclass
class BenchmarkResults:
    """Stores and analyzes results from multiple benchmark runs."""

    results: Dict[str, Dict[str, List[LearningMetrics]]] = field(default_factory=dict)
    # Structure: {grammar: {learner: [metrics1, metrics2, ...]}}

    def add_result(self, grammar: str, learner: str, metrics: LearningMetrics):
        """Add a benchmark result."""
        self.results.setdefault(grammar, {}).setdefault(learner, []).append(metrics)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert results to a pandas DataFrame for analysis."""
        data = []
        for grammar, learner_results in self.results.items():
            for learner, metrics_list in learner_results.items():
                for i, metrics in enumerate(metrics_list):
                    row = {
                        'grammar': grammar,
                        'learner': learner,
                        'run': i,
                        'total_time': metrics.total_time,
                        'rounds': metrics.rounds,
                        'membership_queries': metrics.membership_queries,
                        'examples': metrics.examples,
                        'counterexamples': metrics.counterexamples_found,
                        'avg_counterexample_length': metrics.avg_counterexample_length,
                        'dimension': metrics.dimension,
                        'train_accuracy': metrics.train_accuracy,
                        'test_accuracy': metrics.test_accuracy,
                        'status': metrics.status,
                        'learning_successful': metrics.learning_successful,
                    }
                    for k, v in metrics.confusion.items():
                        row[f'test_{k}'] = v
                    data.append(row)

        return pd.DataFrame(data)

    def plot_accuracy_comparison(self, save_path: Optional[Path] = None):
        """Plot train vs test accuracy for each learner."""
        df = self.to_dataframe()

        fig, ax = plt.subplots(figsize=(10, 6))

        plot_df = df.melt(id_vars=['learner', 'grammar'],
                          value_vars=['train_accuracy', 'test_accuracy'],
                          var_name='Accuracy Type', value_name='Accuracy')
        plot_df['Accuracy Type'] = plot_df['Accuracy Type'].map(
            {'train_accuracy': 'Train', 'test_accuracy': 'Test'})

        # Create grouped bar plot
        sns.barplot(data=plot_df, x='learner', y='Accuracy', hue='Accuracy Type', ax=ax)
        ax.set_xlabel('Learner')
        ax.set_ylabel('Accuracy')
        ax.set_title('Train vs Test Accuracy by Learner')
        ax.set_ylim(0, 1.1)

        # Add value labels on bars
        for container in ax.containers:
            ax.bar_label(container, fmt='%.2f')

        plt.tight_layout()
        if save_path:
            plt.savefig(save_path)
        plt.close(fig)

    def plot_dimension_comparison(self, save_path: Optional[Path] = None):
        """Plot the learned dimension per grammar and learner."""
        df = self.to_dataframe()

        fig, ax = plt.subplots(figsize=(10, 6))
        sns.barplot(data=df, x='grammar', y='dimension', hue='learner', ax=ax)
        ax.set_xlabel('Grammar')
        ax.set_ylabel('Hypothesis Dimension')
        ax.set_title('Learned Dimension by Grammar')

        plt.tight_layout()
        if save_path:
            plt.savefig(save_path)
        plt.close(fig)

    def export_to_csv(self, path: Path):
        """Export results to CSV file."""
        df = self.to_dataframe()
        df.to_csv(path, index=False)

    def save_to_json(self, path: Path):
        """Save raw results to JSON file."""
        serializable_results = {
            grammar: {
                learner: [asdict(m) for m in metrics_list]
                for learner, metrics_list in learner_results.items()
            }
            for grammar, learner_results in self.results.items()
        }

        with open(path, 'w') as f:
            json.dump(serializable_results, f, indent=2)

    def print_summary(self):
        """Print a clear summary of benchmark results."""
        df = self.to_dataframe()

        print("\n" + "="*80)
        print("BENCHMARK RESULTS SUMMARY")
        print("="*80)

        for grammar in df['grammar'].unique():
            print(f"\nGrammar: {grammar}")
            print("-" * 60)

            grammar_df = df[df['grammar'] == grammar]

            summary = grammar_df.groupby('learner').agg({
                'total_time': 'mean',
                'train_accuracy': 'mean',
                'test_accuracy': 'mean',
                'dimension': 'mean',
                'rounds': 'mean',
                'learning_successful': 'mean'
            }).round(3)

            # Rename columns for clarity
            summary.columns = [
                'Avg Time (s)',
                'Train Acc',
                'Test Acc',
                'Avg Dimension',
                'Avg Rounds',
                'Success Rate'
            ]

            print(summary.to_string())

        print("\n" + "="*80)
