"""
Model Training Module
=====================
Trains and evaluates two classifiers predicting whether an inspection
recorded no violation at all (severity score of zero).

Models implemented:
1. Decision Tree (single greedy tree, Gini splits, cost-complexity pruning)
2. Random Forest (bootstrap ensemble of Gini trees, majority vote)

Includes:
- Modeling table construction (one row per inspection)
- Leakage-prone and identifier column removal
- Complete-case filtering (no imputation)
- In-sample confusion matrices and accuracy
- Feature importance (mean decrease in accuracy and in impurity)

Author: [Your Name]
Date: [Oct 18, 2026]
"""

import logging
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from sklearn.compose import ColumnTransformer
from sklearn.ensemble import RandomForestClassifier
from sklearn.inspection import permutation_importance
from sklearn.metrics import confusion_matrix, f1_score, precision_score, recall_score
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder
from sklearn.tree import DecisionTreeClassifier, export_text

from .config import MIN_TRAINING_ROWS, N_ESTIMATORS, PERMUTATION_REPEATS, RANDOM_STATE
from .exceptions import ModelTrainingError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TARGET_COL = 'severity_score_pass'

# One modeling row per combination of these columns
MODELING_KEYS = [
    'establishment_id', 'inspection_id', 'inspection_date',
    'latitude', 'longitude', 'min_inspections_numeric', 'establishment_type'
]

# Label analogue and high-cardinality identifiers
EXCLUDED_COLS = ['severity_score', 'inspection_id', 'establishment_id', 'inspection_date']

NUMERIC_FEATURES = ['latitude', 'longitude', 'min_inspections_numeric']
CATEGORICAL_FEATURES = ['establishment_type']
FEATURE_COLS = NUMERIC_FEATURES + CATEGORICAL_FEATURES

MODEL_LABELS = {
    'decision_tree': 'Decision Tree',
    'random_forest': 'Random Forest',
}


class ModelTrainer:
    """
    Builds the modeling table, trains both classifiers and evaluates them.

    Decision tree: greedy recursive binary splitting on Gini impurity
    reduction. A node is only split with at least 20 rows, every leaf keeps
    at least 7, depth is capped at 30 and the grown tree is pruned by
    minimal cost-complexity pruning (alpha 0.001).

    Random forest: n_estimators Gini trees, each grown on a bootstrap sample
    and considering sqrt(n_features) candidates per split; predictions are
    the majority vote.

    Example:
        trainer = ModelTrainer()
        results = trainer.train_all_models(df_features)
        trainer.get_feature_importance()
    """

    def __init__(
        self,
        random_state: int = RANDOM_STATE,
        n_estimators: int = N_ESTIMATORS,
        min_training_rows: int = MIN_TRAINING_ROWS,
        permutation_repeats: int = PERMUTATION_REPEATS
    ):
        """
        Initialize the trainer.

        Args:
            random_state: Random seed for reproducibility
            n_estimators: Number of trees in the random forest
            min_training_rows: Fewest complete rows a model may be trained on
            permutation_repeats: Shuffles per feature for accuracy decrease
        """
        self.random_state = random_state
        self.n_estimators = n_estimators
        self.min_training_rows = min_training_rows
        self.permutation_repeats = permutation_repeats
        self.models = {}
        self.results = {}
        self.feature_importance = None

    def build_modeling_table(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Collapse derived inspection rows into one row per inspection.

        Args:
            df: Derived inspection DataFrame

        Returns:
            DataFrame with the modeling keys, severity_score and the
            binary label (1 when the inspection has no violation)
        """
        table = (
            df.groupby(MODELING_KEYS, sort=False, dropna=False)['severity_value']
            .sum()
            .reset_index(name='severity_score')
        )
        table[TARGET_COL] = (table['severity_score'] == 0).astype(int)

        logger.info(f"Modeling table: {len(table):,} inspections, "
                    f"{int(table[TARGET_COL].sum()):,} without violations")
        return table

    def prepare_model_data(self, table: pd.DataFrame) -> Tuple[pd.DataFrame, pd.Series]:
        """
        Drop excluded columns and incomplete rows.

        Args:
            table: Output of build_modeling_table

        Returns:
            X (latitude, longitude, min_inspections_numeric,
            establishment_type) and y
        """
        model_df = table.drop(columns=EXCLUDED_COLS)

        complete = model_df.dropna()
        dropped = len(model_df) - len(complete)
        if dropped:
            logger.info(f"Dropped {dropped:,} incomplete rows ({len(complete):,} remaining)")

        X = complete[FEATURE_COLS].copy()
        X['establishment_type'] = X['establishment_type'].astype(str)
        y = complete[TARGET_COL].astype(int)

        logger.info(f"Using {len(FEATURE_COLS)} features for modeling")
        return X, y

    def _check_training_data(self, y: pd.Series, model_name: str) -> None:
        """Refuse to fit on too few rows or on a single-class label."""
        label = MODEL_LABELS[model_name]
        if len(y) < self.min_training_rows:
            raise ModelTrainingError(
                f"{label}: only {len(y):,} complete rows, need at least {self.min_training_rows:,}"
            )

        classes = sorted(y.unique().tolist())
        if len(classes) < 2:
            raise ModelTrainingError(
                f"{label}: label has a single observed class {classes}; refusing to fit a trivial model"
            )

    def _make_preprocessor(self) -> ColumnTransformer:
        """One-hot encode the establishment type, pass numeric columns through."""
        return ColumnTransformer([
            ('type', OneHotEncoder(handle_unknown='ignore', sparse_output=False), CATEGORICAL_FEATURES),
            ('num', 'passthrough', NUMERIC_FEATURES),
        ])

    def train_decision_tree(self, X: pd.DataFrame, y: pd.Series) -> Pipeline:
        """Train the single decision tree."""
        self._check_training_data(y, 'decision_tree')

        tree = DecisionTreeClassifier(
            criterion='gini',
            min_samples_split=20,
            min_samples_leaf=7,
            max_depth=30,
            ccp_alpha=0.001,
            random_state=self.random_state
        )
        model = Pipeline([('prep', self._make_preprocessor()), ('clf', tree)])
        model.fit(X, y)

        logger.info(f"Decision tree: depth {tree.get_depth()}, {tree.get_n_leaves()} leaves")
        self.models['decision_tree'] = model
        return model

    def train_random_forest(self, X: pd.DataFrame, y: pd.Series) -> Pipeline:
        """Train the random forest."""
        self._check_training_data(y, 'random_forest')

        rf = RandomForestClassifier(
            n_estimators=self.n_estimators,
            criterion='gini',
            bootstrap=True,
            max_features='sqrt',
            random_state=self.random_state,
            n_jobs=-1
        )
        model = Pipeline([('prep', self._make_preprocessor()), ('clf', rf)])
        model.fit(X, y)

        logger.info(f"Random forest: {self.n_estimators} trees")
        self.models['random_forest'] = model
        return model

    def train_all_models(self, df: pd.DataFrame) -> Dict[str, Dict]:
        """
        Build the modeling data, train and evaluate both models.

        Args:
            df: Derived inspection DataFrame

        Returns:
            Dictionary of results for each model
        """
        table = self.build_modeling_table(df)
        X, y = self.prepare_model_data(table)

        results = {}

        logger.info("Training Decision Tree...")
        tree = self.train_decision_tree(X, y)
        results['decision_tree'] = self.evaluate('decision_tree', tree, X, y)

        logger.info("Training Random Forest...")
        forest = self.train_random_forest(X, y)
        results['random_forest'] = self.evaluate('random_forest', forest, X, y)

        self.feature_importance = self._compute_feature_importance(forest, X, y)

        self.results = results
        return results

    def evaluate(self, model_name: str, model: Pipeline, X: pd.DataFrame, y: pd.Series) -> Dict:
        """
        In-sample confusion matrix and accuracy.

        The confusion matrix is indexed by observed label and has one column
        per predicted label; accuracy is its trace over its total.
        """
        y_pred = model.predict(X)

        cm = confusion_matrix(y, y_pred, labels=[0, 1])
        cm_df = pd.DataFrame(
            cm,
            index=pd.Index([0, 1], name='observed'),
            columns=pd.Index([0, 1], name='predicted')
        )

        metrics = {
            'model_name': MODEL_LABELS[model_name],
            'n_rows': len(y),
            'confusion_matrix': cm_df,
            'accuracy': float(np.trace(cm) / cm.sum()),
            'precision': precision_score(y, y_pred, zero_division=0),
            'recall': recall_score(y, y_pred, zero_division=0),
            'f1_score': f1_score(y, y_pred, zero_division=0),
        }

        logger.info(f"\n{metrics['model_name']} Results:")
        logger.info(f"  Rows:      {metrics['n_rows']:,}")
        logger.info(f"  Accuracy:  {metrics['accuracy']:.3f}")
        logger.info(f"  Precision: {metrics['precision']:.3f}")
        logger.info(f"  Recall:    {metrics['recall']:.3f}")
        logger.info(f"  F1-Score:  {metrics['f1_score']:.3f}")

        return metrics

    def _encoded_sources(self, model: Pipeline) -> List[str]:
        """Original feature name of every column the preprocessor emits."""
        encoder = model.named_steps['prep'].named_transformers_['type']
        sources = []
        for feature, categories in zip(CATEGORICAL_FEATURES, encoder.categories_):
            sources.extend([feature] * len(categories))
        return sources + NUMERIC_FEATURES

    def _compute_feature_importance(self, model: Pipeline, X: pd.DataFrame, y: pd.Series) -> pd.DataFrame:
        """
        Importance of each original feature for a fitted forest.

        mean_decrease_accuracy shuffles one raw column at a time and measures
        the drop in accuracy; mean_decrease_impurity sums the forest's Gini
        importances over the columns encoding each feature.
        """
        forest = model.named_steps['clf']
        mdi = (
            pd.Series(forest.feature_importances_, index=self._encoded_sources(model))
            .groupby(level=0)
            .sum()
        )

        perm = permutation_importance(
            model, X, y,
            scoring='accuracy',
            n_repeats=self.permutation_repeats,
            random_state=self.random_state
        )
        mda = pd.Series(perm.importances_mean, index=X.columns)

        importance_df = pd.DataFrame({
            'feature': FEATURE_COLS,
            'mean_decrease_accuracy': [float(mda[f]) for f in FEATURE_COLS],
            'mean_decrease_impurity': [float(mdi.get(f, 0.0)) for f in FEATURE_COLS],
        })
        return importance_df.sort_values(
            'mean_decrease_accuracy', ascending=False, kind='stable'
        ).reset_index(drop=True)

    def get_feature_importance(self, sort_by: str = 'mean_decrease_accuracy') -> pd.DataFrame:
        """
        Random forest feature importance ranking.

        Args:
            sort_by: 'mean_decrease_accuracy' or 'mean_decrease_impurity'

        Returns:
            DataFrame with one row per feature
        """
        if self.feature_importance is None:
            raise ValueError("Random forest not trained. Train it first!")

        return self.feature_importance.sort_values(
            sort_by, ascending=False, kind='stable'
        ).reset_index(drop=True)

    def export_tree_rules(self) -> str:
        """Text rendering of the fitted decision tree's splits."""
        if 'decision_tree' not in self.models:
            raise ValueError("Decision tree not trained. Train it first!")

        model = self.models['decision_tree']
        names = model.named_steps['prep'].get_feature_names_out()
        return export_text(model.named_steps['clf'], feature_names=list(names))

    def plot_feature_importance(self, sort_by: str = 'mean_decrease_accuracy', save_path: Optional[str] = None):
        """Plot random forest feature importance."""

        importance_df = self.get_feature_importance(sort_by)

        fig, ax = plt.subplots(figsize=(8, 5))
        sns.barplot(data=importance_df, x=sort_by, y='feature', color='steelblue', ax=ax)
        ax.set_title('Random Forest Feature Importance')
        ax.set_xlabel(sort_by.replace('_', ' ').title())
        ax.set_ylabel('Feature')

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            logger.info(f"Saved feature importance plot to {save_path}")

        plt.close(fig)
        return fig

    def plot_confusion_matrix(self, model_name: str, save_path: Optional[str] = None):
        """Plot the confusion matrix of a trained model."""

        if model_name not in self.results:
            raise ValueError(f"Model '{model_name}' not found. Train it first!")

        cm_df = self.results[model_name]['confusion_matrix']

        fig, ax = plt.subplots(figsize=(6, 5))
        sns.heatmap(
            cm_df,
            annot=True,
            fmt='d',
            cmap='Blues',
            xticklabels=['Violation', 'No violation'],
            yticklabels=['Violation', 'No violation'],
            ax=ax
        )
        ax.set_xlabel('Predicted')
        ax.set_ylabel('Observed')
        ax.set_title(f"Confusion Matrix - {MODEL_LABELS[model_name]}")

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            logger.info(f"Saved confusion matrix to {save_path}")

        plt.close(fig)
        return fig

    def print_comparison_table(self):
        """Print a comparison table of both model results."""

        if not self.results:
            logger.warning("No results to display. Train models first!")
            return

        print("\n" + "="*60)
        print("MODEL COMPARISON")
        print("="*60)
        print(f"{'Model':<20} {'Rows':<10} {'Accuracy':<10} {'Precision':<10} {'Recall':<10}")
        print("-"*60)

        for metrics in self.results.values():
            print(f"{metrics['model_name']:<20} "
                  f"{metrics['n_rows']:<10,} "
                  f"{metrics['accuracy']:<10.3f} "
                  f"{metrics['precision']:<10.3f} "
                  f"{metrics['recall']:<10.3f}")

        print("="*60)
